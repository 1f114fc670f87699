"""Loan lifecycle: checkout, return and the bookkeeping around them."""

from datetime import datetime, timedelta

from loguru import logger
from sqlmodel import Session

from src.library.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from src.library.core.services.base import service_operation
from src.library.entities.core._base import utc_now
from src.library.entities.service.book import BookRepository
from src.library.entities.service.loan import (
    Loan,
    LoanRepository,
    LoanRequest,
    LoanReturn,
    LoanStatus,
)
from src.library.entities.service.reader import ReaderRepository
from src.library.runtime.context import get_config


class LoanService:
    """Orchestrates loans against the book and reader stores.

    Every public method is a single transaction on the injected session:
    availability changes and the loan row are committed together or not at
    all.
    """

    entity_name = "Loan"

    def __init__(self, session: Session) -> None:
        self._session = session
        self._loans = LoanRepository(session)
        self._books = BookRepository(session)
        self._readers = ReaderRepository(session)

    def _get_or_raise(self, loan_id: str) -> Loan:
        loan = self._loans.get(loan_id)
        if loan is None:
            raise NotFoundError(f"Loan with id {loan_id} not found")
        return loan

    def _check_references(self, book_id: str, reader_id: str) -> None:
        if not self._books.exists(book_id):
            raise NotFoundError(f"Book with id {book_id} not found")
        if not self._readers.exists(reader_id):
            raise NotFoundError(f"Reader with id {reader_id} not found")

    @staticmethod
    def _check_period(loan_date: datetime, due_date: datetime) -> None:
        if due_date < loan_date:
            raise InvalidRequestError("Due date cannot be earlier than the loan date")

    @service_operation("Error while registering the loan")
    def create(self, request: LoanRequest) -> Loan:
        """Check a book out to a reader.

        Raises:
            NotFoundError: the book or the reader does not exist.
            InvalidRequestError: the due date precedes the loan date.
            ConflictError: no unit of the book is available.
        """
        self._check_references(request.book_id, request.reader_id)

        loan_date = request.loan_date or utc_now()
        due_date = request.due_date or loan_date + timedelta(
            days=get_config().library.loan_period_days
        )
        self._check_period(loan_date, due_date)

        if not self._books.decrement_availability(request.book_id):
            logger.bind(book_id=request.book_id).warning("loan.unavailable")
            raise ConflictError(
                f"Book with id {request.book_id} has no units available for loan"
            )

        loan = self._loans.create(
            Loan(
                book_id=request.book_id,
                reader_id=request.reader_id,
                loan_date=loan_date,
                due_date=due_date,
                status=LoanStatus.ACTIVE,
            )
        )
        self._session.commit()
        logger.bind(
            loan_id=loan.id, book_id=loan.book_id, reader_id=loan.reader_id
        ).info("loan.created")
        return loan

    @service_operation("Error while listing loans")
    def get_all(self) -> list[Loan]:
        return self._loans.list_all()

    @service_operation("Error while listing loans")
    def get_by_status(self, status: LoanStatus) -> list[Loan]:
        return self._loans.list_by_status(status)

    def get_active_loans(self) -> list[Loan]:
        return self.get_by_status(LoanStatus.ACTIVE)

    @service_operation("Error while fetching the loan")
    def find_by_id(self, loan_id: str) -> Loan:
        return self._get_or_raise(loan_id)

    @service_operation("Error while updating the loan")
    def update(self, loan_id: str, data: Loan) -> Loan:
        """Overwrite the editable fields of a loan.

        ``status`` and ``return_date`` belong to the return step and keep
        their stored values. The new book and reader must exist; an ACTIVE
        loan cannot move to another book, since its unit is held by the
        current one. Availability is left untouched.
        """
        current = self._get_or_raise(loan_id)
        self._check_references(data.book_id, data.reader_id)
        self._check_period(data.loan_date, data.due_date)
        if current.is_active and data.book_id != current.book_id:
            raise InvalidRequestError(
                "An active loan cannot be moved to another book; return it first"
            )

        updated = self._loans.update(
            data.model_copy(
                update={
                    "id": loan_id,
                    "status": current.status,
                    "return_date": current.return_date,
                }
            )
        )
        self._session.commit()
        logger.bind(loan_id=loan_id).info("loan.updated")
        return updated

    @service_operation("Error while deleting the loan")
    def delete(self, loan_id: str) -> str:
        loan = self._get_or_raise(loan_id)

        restored = False
        if loan.is_active and get_config().library.restore_availability_on_delete:
            restored = self._books.increment_availability(loan.book_id)

        self._loans.delete(loan_id)
        self._session.commit()
        logger.bind(loan_id=loan_id, availability_restored=restored).info(
            "loan.deleted"
        )
        return "Loan deleted successfully"

    @service_operation("Error while returning the loan")
    def return_loan(self, loan_id: str, data: LoanReturn | None = None) -> Loan:
        """Close an active loan and put the book back on the shelf.

        Returning a loan that is already RETURNED changes nothing and
        answers the stored loan.
        """
        loan = self._get_or_raise(loan_id)
        if not loan.is_active:
            logger.bind(loan_id=loan_id).warning("loan.already_returned")
            return loan

        return_date = (data.return_date if data else None) or utc_now()
        if return_date < loan.loan_date:
            raise InvalidRequestError("Return date cannot be earlier than the loan date")

        if self._loans.mark_returned(loan_id, return_date):
            self._books.increment_availability(loan.book_id)
            self._session.commit()
            logger.bind(loan_id=loan_id, book_id=loan.book_id).info("loan.returned")
        else:
            # Another request returned it between our read and the update
            logger.bind(loan_id=loan_id).warning("loan.already_returned")

        return self._get_or_raise(loan_id)
