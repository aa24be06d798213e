"""CLI commands for PactBot.

Provides command-line interface using Typer:
- pactbot serve: Run the API server
- pactbot db init: Create database tables
- pactbot db migrate: Apply schema migrations

Usage:
    pactbot --help
    pactbot serve --port 8080
    pactbot db migrate
"""

import typer

from pactbot.cli.db_cmd import app as db_app
from pactbot.cli.serve import app as serve_app

app = typer.Typer(
    name="pactbot",
    help="PactBot: contract analysis records API",
    no_args_is_help=True,
)

app.add_typer(serve_app, name="serve")
app.add_typer(db_app, name="db")


@app.callback()
def callback() -> None:
    """PactBot: contract analysis records API."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
