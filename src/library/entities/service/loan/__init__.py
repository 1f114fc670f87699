"""Entity package: Loan."""

from .entity import Loan, LoanRequest, LoanReturn, LoanStatus
from .repository import LoanRepository
from .table import LoanTable

__all__ = [
    "Loan",
    "LoanRepository",
    "LoanRequest",
    "LoanReturn",
    "LoanStatus",
    "LoanTable",
]
