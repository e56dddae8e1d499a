"""User management CLI commands."""

import typer
from rich.table import Table

from src.user_service.core.exceptions import BusinessError
from src.user_service.core.models.commands import CreateUserCommand

from .utils import console, service_dependencies

users_app = typer.Typer(help="👥 User management commands")


@users_app.command("list")
def list_users() -> None:
    """📋 List all users."""
    with service_dependencies() as deps:
        users = deps.user_service.get_all_users()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Username", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Phone", style="blue")
    table.add_column("Status", style="yellow")
    table.add_column("Created", style="dim")

    for user in users:
        table.add_row(
            user.id,
            user.username,
            user.email or "-",
            user.phone or "-",
            user.status.value,
            user.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


@users_app.command("create")
def create_user(
    username: str = typer.Argument(..., help="Unique username"),
    email: str | None = typer.Option(None, help="Email address"),
    phone: str | None = typer.Option(None, help="Phone number"),
) -> None:
    """➕ Register a new user."""
    with service_dependencies() as deps:
        try:
            user = deps.user_service.create_user(
                CreateUserCommand(username=username, email=email, phone=phone)
            )
        except BusinessError as e:
            console.print(f"[red]❌ {e.message}[/red]")
            raise typer.Exit(1) from None

    console.print(f"[green]✅ Created user {user.username} ({user.id})[/green]")


@users_app.command("delete")
def delete_user(
    user_id: str = typer.Argument(..., help="ID of the user to delete"),
) -> None:
    """🗑️  Delete a user."""
    with service_dependencies() as deps:
        try:
            deps.user_service.delete_user(user_id)
        except BusinessError as e:
            console.print(f"[red]❌ {e.message}[/red]")
            raise typer.Exit(1) from None

    console.print(f"[green]✅ Deleted user {user_id}[/green]")
