"""Loan database table model."""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field

from src.library.entities.core._base import EntityTable, utc_now

from .entity import LoanStatus


class LoanTable(EntityTable, table=True):
    """Database persistence model for loans.

    Book and reader are plain foreign keys; deleting a loan never touches them.
    """

    book_id: str = Field(foreign_key="booktable.id", index=True)
    reader_id: str = Field(foreign_key="readertable.id", index=True)
    loan_date: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    due_date: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    return_date: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    status: LoanStatus = Field(default=LoanStatus.ACTIVE, index=True)
