"""Entity: Loan."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.library.entities.core._base import Entity, ensure_utc, utc_now


class LoanStatus(str, Enum):
    """Loan lifecycle: ACTIVE on creation, RETURNED once the book is back.

    RETURNED is terminal.
    """

    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"


class Loan(Entity):
    """A reader borrowing one book for a period.

    The loan only references the book and the reader; both outlive it.
    """

    book_id: str = Field(description="Borrowed book")
    reader_id: str = Field(description="Borrowing reader")
    loan_date: datetime = Field(default_factory=utc_now, description="Checkout time")
    due_date: datetime = Field(description="Expected return time")
    return_date: datetime | None = Field(
        default=None, description="Actual return time, set by the return step"
    )
    status: LoanStatus = Field(default=LoanStatus.ACTIVE)

    @field_validator("loan_date", "due_date", "return_date")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE

    def __eq__(self, other: Any) -> bool:
        """Compare loans by business attributes, ignoring timestamps."""
        if not isinstance(other, Loan):
            return False

        return (
            self.id == other.id
            and self.book_id == other.book_id
            and self.reader_id == other.reader_id
            and self.status == other.status
        )

    def __hash__(self) -> int:
        return hash((self.id, self.book_id, self.reader_id, self.status))


class LoanRequest(BaseModel):
    """Payload for opening a loan.

    Dates are optional: the loan starts now and runs for the configured
    loan period unless told otherwise.
    """

    book_id: str
    reader_id: str
    loan_date: datetime | None = None
    due_date: datetime | None = None

    @field_validator("loan_date", "due_date")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class LoanReturn(BaseModel):
    """Payload for closing a loan."""

    return_date: datetime | None = None

    @field_validator("return_date")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)
