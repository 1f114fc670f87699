"""Interleaved access from two sessions on the same database file.

Each test freezes one session on a stale read, lets the other one commit,
then resumes the stale session. The conditional UPDATEs must still keep the
stock consistent.
"""

from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

from src.library.core.exceptions import ConflictError
from src.library.core.services import LoanService
from src.library.entities.service.book import Book, BookRepository
from src.library.entities.service.loan import LoanRepository, LoanRequest, LoanStatus
from src.library.entities.service.reader import Reader, ReaderRepository


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine]:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'races.db'}",
        connect_args={"check_same_thread": False},
    )
    from src.library.entities.service.book import BookTable  # noqa: F401
    from src.library.entities.service.loan import LoanTable  # noqa: F401
    from src.library.entities.service.reader import ReaderTable  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def seeded(engine: Engine) -> tuple[str, str, str]:
    """One book with a single unit and two readers."""
    with Session(engine) as session:
        book = BookRepository(session).create(
            Book(
                code="813",
                title="Dune",
                author="Frank Herbert",
                publisher="Chilton",
                available_quantity=1,
            )
        )
        first = ReaderRepository(session).create(Reader(name="First"))
        second = ReaderRepository(session).create(Reader(name="Second"))
        session.commit()
        return book.id, first.id, second.id


def test_two_checkouts_of_the_last_unit(engine: Engine, seeded):
    book_id, first_id, second_id = seeded

    with Session(engine, expire_on_commit=False) as a, Session(
        engine, expire_on_commit=False
    ) as b:
        # b sees the unit on the shelf before a takes it
        stale = BookRepository(b).get(book_id)
        assert stale.available_quantity == 1

        LoanService(a).create(LoanRequest(book_id=book_id, reader_id=first_id))

        with pytest.raises(ConflictError):
            LoanService(b).create(LoanRequest(book_id=book_id, reader_id=second_id))

    with Session(engine) as check:
        assert BookRepository(check).get(book_id).available_quantity == 0
        loans = LoanRepository(check).list_all()
        assert [loan.reader_id for loan in loans] == [first_id]


def test_two_returns_of_the_same_loan(engine: Engine, seeded):
    book_id, first_id, _ = seeded
    loan_date = datetime(2024, 5, 1, tzinfo=UTC)

    with Session(engine, expire_on_commit=False) as setup:
        loan = LoanService(setup).create(
            LoanRequest(book_id=book_id, reader_id=first_id, loan_date=loan_date)
        )

    with Session(engine, expire_on_commit=False) as a, Session(
        engine, expire_on_commit=False
    ) as b:
        # b still holds the loan as ACTIVE in its identity map
        assert LoanRepository(b).get(loan.id).status == LoanStatus.ACTIVE

        LoanService(a).return_loan(loan.id)
        result = LoanService(b).return_loan(loan.id)

        assert result.status == LoanStatus.RETURNED

    with Session(engine) as check:
        assert BookRepository(check).get(book_id).available_quantity == 1
        stored = LoanRepository(check).get(loan.id)
        assert stored.return_date is not None
        assert stored.return_date >= loan_date
