"""CLI commands for managing the database schema.

Usage:
    pactbot db init
    pactbot db migrate [REVISION]
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from pactbot.config import settings
from pactbot.persistence.db import close_db, init_db

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "persistence" / "migrations"

app = typer.Typer(help="Database schema commands", no_args_is_help=True)


def _target() -> str:
    return settings.database_url.rsplit("@", 1)[-1]


async def _init() -> None:
    try:
        await init_db()
    finally:
        await close_db()


@app.command("init")
def init_database() -> None:
    """Create the contract tables if they do not exist."""
    typer.echo(f"Initializing database at {_target()}")
    asyncio.run(_init())
    typer.echo("Database ready")


@app.command("migrate")
def migrate(
    revision: str = typer.Argument("head", help="Target revision"),
    sql: bool = typer.Option(False, "--sql", help="Print SQL instead of applying it"),
) -> None:
    """Apply Alembic migrations up to REVISION."""
    from alembic import command
    from alembic.config import Config

    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))

    typer.echo(f"Migrating {_target()} to {revision}")
    command.upgrade(cfg, revision, sql=sql)
