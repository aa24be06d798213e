"""Initial schema for pactbot.

Revision ID: 001_initial
Revises:
Create Date: 2026-01-05

Creates the contract_analyses table using the dual storage pattern:
- doc (JSONB): for PostgreSQL queries and filters
- doc_bytes (BYTEA): canonical JSON served on reads and mirrored in the cache
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "contract_analyses",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("contract_type", sa.Text(), nullable=False),
        sa.Column("doc", postgresql.JSONB(), nullable=False),
        sa.Column("doc_bytes", sa.LargeBinary(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_contract_analyses_owner_created",
        "contract_analyses",
        ["owner_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_contract_analyses_owner_created", table_name="contract_analyses")
    op.drop_table("contract_analyses")
