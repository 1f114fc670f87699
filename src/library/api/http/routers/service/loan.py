"""Loan API router."""

from fastapi import APIRouter, Depends, status

from src.library.api.http.deps import get_loan_service
from src.library.core.services import LoanService
from src.library.entities.service.loan import Loan, LoanRequest, LoanReturn, LoanStatus

router = APIRouter(tags=["loans"])


@router.post("/loan", response_model=Loan, status_code=status.HTTP_201_CREATED)
def create_loan(
    request: LoanRequest,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Check a book out to a reader."""
    return service.create(request)


@router.get("/loans", response_model=list[Loan])
def list_loans(
    status: LoanStatus | None = None,
    service: LoanService = Depends(get_loan_service),
) -> list[Loan]:
    """List loans, optionally only those in the given status."""
    if status is None:
        return service.get_all()
    return service.get_by_status(status)


@router.get("/loans/active", response_model=list[Loan])
def list_active_loans(
    service: LoanService = Depends(get_loan_service),
) -> list[Loan]:
    """List loans that have not been returned yet."""
    return service.get_active_loans()


@router.get("/loan/{loan_id}", response_model=Loan)
def get_loan(
    loan_id: str,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Get a loan by ID."""
    return service.find_by_id(loan_id)


@router.put("/loan/{loan_id}", response_model=Loan)
def update_loan(
    loan_id: str,
    loan: Loan,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Overwrite a loan."""
    return service.update(loan_id, loan)


@router.delete("/loan/{loan_id}")
def delete_loan(
    loan_id: str,
    service: LoanService = Depends(get_loan_service),
) -> dict[str, str]:
    """Delete a loan."""
    return {"message": service.delete(loan_id)}


@router.post("/loan/return/{loan_id}", response_model=Loan)
def return_loan(
    loan_id: str,
    data: LoanReturn | None = None,
    service: LoanService = Depends(get_loan_service),
) -> Loan:
    """Return a borrowed book."""
    return service.return_loan(loan_id, data)
