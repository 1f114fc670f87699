"""Entity: Reader."""

from datetime import date

from pydantic import Field

from src.library.entities.core._base import Entity


class Reader(Entity):
    """Reader entity: a person allowed to borrow books.

    ``national_id`` is optional, but when given it identifies the reader and
    must be unique across the registry.
    """

    name: str = Field(min_length=1, description="Reader's full name")
    national_id: str | None = Field(
        default=None, description="National taxpayer number (CPF)"
    )
    document_id: str | None = Field(
        default=None, description="Identity document number (RG)"
    )
    birth_date: date | None = Field(default=None, description="Date of birth")
    phone: str | None = Field(default=None, description="Contact phone")
    profession: str | None = Field(default=None, description="Profession")
    school: str | None = Field(default=None, description="School, for students")
    grade: str | None = Field(default=None, description="School grade")
    course: str | None = Field(default=None, description="Course")
    shift: str | None = Field(default=None, description="Study shift")
    address: str | None = Field(default=None, description="Postal address")
