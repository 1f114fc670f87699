"""Entity package: Book."""

from .entity import Book, BookStatus, BorrowedBookSummary, book_status
from .repository import BookRepository
from .table import BookTable

__all__ = [
    "Book",
    "BookRepository",
    "BookStatus",
    "BookTable",
    "BorrowedBookSummary",
    "book_status",
]
