"""Core services exports."""

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Domain Services
from .base import CrudService, service_operation
from .book_service import BookService
from .loan_service import LoanService
from .reader_service import ReaderService

__all__ = [
    # Database Services
    "DbManageService",
    "DbSessionService",
    # Domain Services
    "BookService",
    "CrudService",
    "LoanService",
    "ReaderService",
    "service_operation",
]
