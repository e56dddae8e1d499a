"""Server and database CLI commands."""

import typer
import uvicorn
from rich.panel import Panel

from src.user_service.runtime.context import get_config
from src.user_service.runtime.init_db import init_db

from .utils import console


def init_database(
    reset: bool = typer.Option(False, "--reset", help="Drop existing tables first"),
) -> None:
    """🗄️  Create the database tables."""
    config = get_config()
    console.print(f"[cyan]Initializing database at {config.database.url}[/cyan]")
    if reset:
        console.print("[yellow]⚠️  Dropping existing tables[/yellow]")
    init_db(reset=reset)
    console.print("[green]✅ Database initialized[/green]")


def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to config)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """🚀 Start the HTTP API with uvicorn."""
    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            f"[bold green]Starting User Service on {host}:{port}[/bold green]",
            border_style="green",
        )
    )
    uvicorn.run(
        "src.user_service.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )
