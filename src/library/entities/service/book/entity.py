"""Entity: Book."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field

from src.library.entities.core._base import Entity


class BookStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


def book_status(available_quantity: int) -> BookStatus:
    """A book is available while at least one unit is on the shelf."""
    if available_quantity > 0:
        return BookStatus.AVAILABLE
    return BookStatus.UNAVAILABLE


class Book(Entity):
    """Book entity representing a title in the library catalogue.

    ``title`` is the business key: two books may not share it. ``status`` is
    derived from ``available_quantity`` and cannot be set independently.
    """

    code: str = Field(min_length=1, description="Classification code (CDU)")
    title: str = Field(min_length=1, description="Title")
    author: str = Field(min_length=1, description="Author")
    publisher: str = Field(min_length=1, description="Publisher")
    available_quantity: int = Field(
        default=0, ge=0, description="Units currently on the shelf"
    )

    @computed_field
    @property
    def status(self) -> BookStatus:
        return book_status(self.available_quantity)

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.code == other.code
            and self.title == other.title
            and self.author == other.author
            and self.publisher == other.publisher
            and self.available_quantity == other.available_quantity
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.code,
            self.title,
            self.author,
            self.publisher,
            self.available_quantity,
        ))


class BorrowedBookSummary(BaseModel):
    """One row of the most-borrowed ranking."""

    book_id: str
    code: str
    title: str
    author: str
    publisher: str
    loan_count: int
