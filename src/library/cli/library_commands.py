"""Server and reporting CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.library.core.exceptions import LibraryError
from src.library.core.services import BookService, DbSessionService
from src.library.runtime.context import get_config

console = Console()


def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "src.library.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,
    )


def most_borrowed(
    limit: int | None = typer.Option(
        None, "--limit", "-l", min=1, help="Number of books to show"
    ),
) -> None:
    """Show the most borrowed books."""
    database_service = DbSessionService()
    try:
        with database_service.session_scope() as session:
            ranking = BookService(session).most_borrowed(limit)
    except LibraryError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()

    if not ranking:
        console.print("[yellow]No loans recorded yet[/yellow]")
        return

    table = Table(title="Most borrowed books")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Code", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Author", style="magenta")
    table.add_column("Loans", style="yellow", justify="right")

    for position, entry in enumerate(ranking, start=1):
        table.add_row(
            str(position),
            entry.code,
            entry.title,
            entry.author,
            str(entry.loan_count),
        )

    console.print(table)
