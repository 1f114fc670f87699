"""Schema management for the library database."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables."""
        # Table modules register themselves with the shared metadata on import
        from src.library.entities.service.book import BookTable  # noqa: F401
        from src.library.entities.service.loan import LoanTable  # noqa: F401
        from src.library.entities.service.reader import ReaderTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop all database tables."""
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("Database tables dropped.")
