"""Book data-access layer."""

from sqlalchemy import Update, update
from sqlmodel import func, select
from sqlmodel.sql.expression import SelectOfScalar

from src.library.entities.core._base import EntityRepository, utc_now
from src.library.entities.service.loan.table import LoanTable

from .entity import Book, BorrowedBookSummary
from .table import BookTable


class BookRepository(EntityRepository[Book, BookTable]):
    """Data-access layer for books."""

    entity_type = Book
    table_type = BookTable

    def _first(self, statement: SelectOfScalar[BookTable]) -> Book | None:
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_title(self, title: str) -> Book | None:
        return self._first(select(BookTable).where(BookTable.title == title))

    def get_by_code(self, code: str) -> Book | None:
        return self._first(select(BookTable).where(BookTable.code == code))

    def exists_by_title(self, title: str, exclude_id: str | None = None) -> bool:
        statement = select(BookTable.id).where(BookTable.title == title)
        if exclude_id is not None:
            statement = statement.where(BookTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def exists_by_code(self, code: str, exclude_id: str | None = None) -> bool:
        statement = select(BookTable.id).where(BookTable.code == code)
        if exclude_id is not None:
            statement = statement.where(BookTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def list_available(self) -> list[Book]:
        statement = (
            select(BookTable)
            .where(BookTable.available_quantity > 0)
            .order_by(*self._order_by())
        )
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def decrement_availability(self, book_id: str) -> bool:
        """Take one unit off the shelf.

        Single conditional UPDATE: returns False, without touching the row,
        when the book is missing or has no unit left. Concurrent callers
        racing for the last unit cannot both succeed.
        """
        statement = (
            update(BookTable)
            .where(BookTable.id == book_id, BookTable.available_quantity > 0)
            .values(
                available_quantity=BookTable.available_quantity - 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        return self._apply(statement)

    def increment_availability(self, book_id: str) -> bool:
        """Put one unit back on the shelf."""
        statement = (
            update(BookTable)
            .where(BookTable.id == book_id)
            .values(
                available_quantity=BookTable.available_quantity + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        return self._apply(statement)

    def _apply(self, statement: Update) -> bool:
        result = self._session.exec(statement)
        # Rows already loaded in this session are stale after a bulk UPDATE
        self._session.expire_all()
        return result.rowcount == 1

    def top_borrowed(self, limit: int) -> list[BorrowedBookSummary]:
        """Books ranked by how many loans reference them, most borrowed first."""
        loan_count = func.count(LoanTable.id).label("loan_count")
        statement = (
            select(BookTable, loan_count)
            .join(LoanTable, LoanTable.book_id == BookTable.id)
            .group_by(BookTable.id)
            .order_by(loan_count.desc(), BookTable.title)
            .limit(limit)
        )
        return [
            BorrowedBookSummary(
                book_id=row.id,
                code=row.code,
                title=row.title,
                author=row.author,
                publisher=row.publisher,
                loan_count=count,
            )
            for row, count in self._session.exec(statement).all()
        ]
