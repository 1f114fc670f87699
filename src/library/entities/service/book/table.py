"""Book database table model."""

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    The availability status is not stored; it is computed from
    ``available_quantity`` by the domain entity.
    """

    code: str = Field(index=True, unique=True)
    title: str = Field(index=True, unique=True)
    author: str
    publisher: str
    available_quantity: int = Field(default=0, ge=0)
