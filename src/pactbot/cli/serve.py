"""CLI command for running the API server.

Usage:
    pactbot serve
    pactbot serve --port 8080 --reload
"""

from __future__ import annotations

import typer

from pactbot.config import settings

app = typer.Typer(help="Run the PactBot API server")


@app.callback(invoke_without_command=True)
def serve(
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Restart on code changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Worker processes (1 with --reload)"),
) -> None:
    """Run the PactBot API with uvicorn."""
    import uvicorn

    cache = "redis" if settings.redis_url else "disabled"
    typer.echo(f"PactBot API on {host}:{port} (env={settings.env}, cache={cache})")

    uvicorn.run(
        "pactbot.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else workers,
        log_level=settings.log_level.lower(),
    )
