"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.library.api.http.app_data import ApplicationDependencies
from src.library.core.services import BookService, LoanService, ReaderService


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped database session."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_service(db: Session = Depends(get_db_session)) -> BookService:
    return BookService(db)


def get_reader_service(db: Session = Depends(get_db_session)) -> ReaderService:
    return ReaderService(db)


def get_loan_service(db: Session = Depends(get_db_session)) -> LoanService:
    return LoanService(db)
