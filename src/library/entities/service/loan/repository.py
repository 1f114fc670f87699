"""Loan data-access layer."""

from datetime import datetime

from sqlalchemy import delete, update
from sqlmodel import func, select

from src.library.entities.core._base import EntityRepository, utc_now

from .entity import Loan, LoanStatus
from .table import LoanTable


class LoanRepository(EntityRepository[Loan, LoanTable]):
    """Data-access layer for loans."""

    entity_type = Loan
    table_type = LoanTable

    def _order_by(self) -> tuple:
        return (LoanTable.loan_date, LoanTable.created_at, LoanTable.id)

    def list_by_status(self, status: LoanStatus) -> list[Loan]:
        statement = (
            select(LoanTable)
            .where(LoanTable.status == status)
            .order_by(*self._order_by())
        )
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def count_for_book(self, book_id: str, status: LoanStatus | None = None) -> int:
        statement = (
            select(func.count()).select_from(LoanTable).where(LoanTable.book_id == book_id)
        )
        if status is not None:
            statement = statement.where(LoanTable.status == status)
        return self._session.exec(statement).one()

    def count_for_reader(self, reader_id: str, status: LoanStatus | None = None) -> int:
        statement = (
            select(func.count())
            .select_from(LoanTable)
            .where(LoanTable.reader_id == reader_id)
        )
        if status is not None:
            statement = statement.where(LoanTable.status == status)
        return self._session.exec(statement).one()

    def delete_for_book(self, book_id: str) -> int:
        """Remove every loan referencing a book, returning how many went."""
        statement = (
            delete(LoanTable)
            .where(LoanTable.book_id == book_id)
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)
        self._session.expire_all()
        return result.rowcount

    def delete_for_reader(self, reader_id: str) -> int:
        """Remove every loan referencing a reader, returning how many went."""
        statement = (
            delete(LoanTable)
            .where(LoanTable.reader_id == reader_id)
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)
        self._session.expire_all()
        return result.rowcount

    def mark_returned(self, loan_id: str, return_date: datetime) -> bool:
        """Move a loan from ACTIVE to RETURNED.

        Conditional on the current status, so of two concurrent returns only
        one reports True. Returns False when the loan is missing or already
        returned.
        """
        statement = (
            update(LoanTable)
            .where(LoanTable.id == loan_id, LoanTable.status == LoanStatus.ACTIVE)
            .values(
                status=LoanStatus.RETURNED,
                return_date=return_date,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)
        self._session.expire_all()
        return result.rowcount == 1
