"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, text
from sqlmodel import Session, create_engine

from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.context import get_config


class DbSessionService:
    """Owns the engine for the configured database.

    One instance lives on ``app.state`` for the whole process; the CLI builds
    a short-lived one per command.
    """

    def __init__(self) -> None:
        config = get_config()
        self._engine = create_engine(
            config.database.connection_string, **self._engine_options(config)
        )
        logger.bind(
            sqlite=config.database.is_sqlite,
            environment=config.app.environment,
        ).info("Database engine initialized")

    @staticmethod
    def _engine_options(config: ConfigData) -> dict[str, Any]:
        db = config.database
        options: dict[str, Any] = {"echo": db.echo, "pool_pre_ping": True}

        if db.is_sqlite:
            if config.app.environment == "production":
                logger.warning("SQLite is not recommended for production use")
            # Sessions cross threads in the request pool
            options["connect_args"] = {"check_same_thread": False, "timeout": 20}
            return options

        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_recycle=db.pool_recycle,
        )
        if db.url.startswith("postgresql"):
            options["connect_args"] = {
                "application_name": f"{config.app.name}_{config.app.environment}",
                "connect_timeout": 30,
            }
        return options

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session committed on success, rolled back on error. For scripts and the CLI."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.bind(error_type=type(e).__name__).error(
                "Database transaction failed: {}", e
            )
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as e:
            logger.bind(error_type=type(e).__name__).error(
                "Database health check failed: {}", e
            )
            return False
        return True

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
