"""CLI tests driven through Typer's CliRunner."""

from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy import inspect
from typer.testing import CliRunner

from src.library.cli import app
from src.library.core.services import DbSessionService, LoanService
from src.library.entities.service.book import Book, BookRepository
from src.library.entities.service.loan import LoanRequest
from src.library.entities.service.reader import Reader, ReaderRepository
from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.context import with_context

runner = CliRunner()


@pytest.fixture
def file_database(tmp_path: Path):
    override = ConfigData()
    override.database.url = f"sqlite:///{tmp_path / 'cli.db'}"
    with with_context(override):
        yield override.database.url


def _table_names() -> set[str]:
    database_service = DbSessionService()
    try:
        return set(inspect(database_service.engine).get_table_names())
    finally:
        database_service.dispose()


def test_db_init_creates_tables(file_database):
    result = runner.invoke(app, ["db", "init"])

    assert result.exit_code == 0, result.output
    assert {"booktable", "readertable", "loantable"} <= _table_names()


def test_db_drop_requires_confirmation(file_database):
    runner.invoke(app, ["db", "init"])

    result = runner.invoke(app, ["db", "drop"], input="n\n")

    assert result.exit_code == 0
    assert "loantable" in _table_names()


def test_db_drop_forced(file_database):
    runner.invoke(app, ["db", "init"])

    result = runner.invoke(app, ["db", "drop", "--force"])

    assert result.exit_code == 0, result.output
    assert _table_names() == set()


def test_most_borrowed_empty(file_database):
    runner.invoke(app, ["db", "init"])

    result = runner.invoke(app, ["most-borrowed"])

    assert result.exit_code == 0, result.output
    assert "No loans recorded yet" in result.output


def test_most_borrowed_table(file_database):
    runner.invoke(app, ["db", "init"])
    database_service = DbSessionService()
    try:
        with database_service.session_scope() as session:
            book = BookRepository(session).create(
                Book(
                    code="813",
                    title="Dune",
                    author="Herbert",
                    publisher="Chilton",
                    available_quantity=2,
                )
            )
            reader = ReaderRepository(session).create(Reader(name="Paul"))
        with database_service.session_scope() as session:
            LoanService(session).create(LoanRequest(book_id=book.id, reader_id=reader.id))
    finally:
        database_service.dispose()

    result = runner.invoke(app, ["most-borrowed", "--limit", "3"])

    assert result.exit_code == 0, result.output
    assert "Dune" in result.output
    assert "Herbert" in result.output


def test_serve_uses_configured_address():
    with patch("uvicorn.run") as run:
        result = runner.invoke(app, ["serve", "--port", "9100"])

    assert result.exit_code == 0, result.output
    run.assert_called_once()
    assert run.call_args.kwargs["port"] == 9100
    assert run.call_args.args[0] == "src.library.api.http.app:app"
