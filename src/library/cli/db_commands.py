"""Database maintenance CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm

from src.library.core.services import DbManageService, DbSessionService
from src.library.runtime.context import get_config
from src.library.runtime.init_db import init_db

console = Console()

db_app = typer.Typer(help="Manage the library database")


@db_app.command("init")
def init() -> None:
    """Create every missing table."""
    try:
        init_db()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(
        f"[green]✅ Database ready at {get_config().database.url}[/green]"
    )


@db_app.command("drop")
def drop(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Drop every table, deleting all books, readers and loans."""
    if not force and not Confirm.ask(
        "[yellow]This deletes all library data. Continue?[/yellow]"
    ):
        console.print("[dim]Aborted[/dim]")
        raise typer.Exit()

    database_service = DbSessionService()
    try:
        DbManageService(database_service.engine).drop_all()
    finally:
        database_service.dispose()
    console.print("[green]✅ All tables dropped[/green]")
