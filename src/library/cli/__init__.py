"""Main CLI application module."""

import typer

from src.library.api.utils.app_startup import configure_logging

from .db_commands import db_app
from .library_commands import most_borrowed, serve

# Create the main CLI application
app = typer.Typer(
    help="📚 Library CLI - Database and lending tools",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(db_app, name="db")
app.command("serve")(serve)
app.command("most-borrowed")(most_borrowed)


def main() -> None:
    """Main entry point for the CLI."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
