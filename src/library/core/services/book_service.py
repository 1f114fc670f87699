"""Catalogue rules for books."""

from loguru import logger
from sqlmodel import Session

from src.library.core.exceptions import ConflictError, NotFoundError
from src.library.core.services.base import CrudService, service_operation
from src.library.entities.service.book import Book, BookRepository, BorrowedBookSummary
from src.library.entities.service.loan import LoanRepository, LoanStatus
from src.library.runtime.context import get_config


class BookService(CrudService[Book]):
    """Book CRUD plus the catalogue queries.

    Titles and classification codes are unique. A book cannot be deleted
    while it is on loan; its returned-loan history goes with it.
    """

    entity_name = "Book"

    def __init__(self, session: Session) -> None:
        self._books = BookRepository(session)
        self._loans = LoanRepository(session)
        super().__init__(session, self._books)

    def _check_unique(self, entity: Book, existing_id: str | None = None) -> None:
        if self._books.exists_by_title(entity.title, exclude_id=existing_id):
            raise ConflictError(f"A book titled '{entity.title}' already exists")
        if self._books.exists_by_code(entity.code, exclude_id=existing_id):
            raise ConflictError(f"A book with code '{entity.code}' already exists")

    def _before_delete(self, item_id: str) -> None:
        active = self._loans.count_for_book(item_id, LoanStatus.ACTIVE)
        if active:
            raise ConflictError(
                f"Book with id {item_id} has {active} active loan(s) and cannot be deleted"
            )
        removed = self._loans.delete_for_book(item_id)
        if removed:
            logger.bind(book_id=item_id, loans=removed).info("book.history_removed")

    @service_operation("Error while listing books")
    def get_available(self) -> list[Book]:
        return self._books.list_available()

    @service_operation("Error while fetching the book")
    def get_by_title(self, title: str) -> Book:
        book = self._books.get_by_title(title)
        if book is None:
            raise NotFoundError(f"Book titled '{title}' not found")
        return book

    @service_operation("Error while fetching the book")
    def get_by_code(self, code: str) -> Book:
        book = self._books.get_by_code(code)
        if book is None:
            raise NotFoundError(f"Book with code '{code}' not found")
        return book

    @service_operation("Error while ranking books")
    def most_borrowed(self, limit: int | None = None) -> list[BorrowedBookSummary]:
        if limit is None:
            limit = get_config().library.top_borrowed_limit
        return self._books.top_borrowed(limit)
