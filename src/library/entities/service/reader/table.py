"""Reader database table model."""

from datetime import date

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class ReaderTable(EntityTable, table=True):
    """Database persistence model for readers."""

    name: str = Field(index=True)
    national_id: str | None = Field(default=None, index=True, unique=True)
    document_id: str | None = None
    birth_date: date | None = None
    phone: str | None = None
    profession: str | None = None
    school: str | None = None
    grade: str | None = None
    course: str | None = None
    shift: str | None = None
    address: str | None = None
