"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with business rules
- table.py: Database persistence model
- repository.py: Data access layer built on the shared EntityRepository
"""

from .service.book import Book, BookRepository, BookStatus, BookTable
from .service.loan import Loan, LoanRepository, LoanStatus, LoanTable
from .service.reader import Reader, ReaderRepository, ReaderTable

__all__ = [
    "Book",
    "BookTable",
    "BookRepository",
    "BookStatus",
    "Reader",
    "ReaderTable",
    "ReaderRepository",
    "Loan",
    "LoanTable",
    "LoanRepository",
    "LoanStatus",
]
