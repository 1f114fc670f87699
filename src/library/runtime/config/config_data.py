"""Typed view of config.yaml.

Each section of the ``config:`` document maps to one model below; defaults
describe a local development setup backed by SQLite.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import make_url


class CORSConfig(BaseModel):
    origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:4200"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    name: str = "library-api"
    environment: Literal["development", "production", "test"] = "development"
    host: str = "localhost"
    port: int = Field(default=8000, ge=1, le=65535)
    cors: CORSConfig = Field(default_factory=CORSConfig)


class LoggingConfig(BaseModel):
    """Console logging is always on; ``file`` adds a rotating file sink."""

    level: str = "INFO"
    format: Literal["json", "plain"] = Field(
        default="plain", description="Format of the file sink"
    )
    file: str | None = Field(default=None, description="Log file path, if any")
    max_size_mb: int = Field(default=10, ge=1, description="Rotate past this size")
    backup_count: int = Field(default=5, ge=0, description="Rotated files to keep")


class DatabaseConfig(BaseModel):
    """Connection settings.

    The password may live in the URL, in an environment variable named by
    ``password_env_var`` or in a mounted secrets file (``password_file``).
    When several are configured the file wins, then the variable.
    """

    url: str = "sqlite:///./library.db"
    echo: bool = Field(default=False, description="Log every SQL statement")
    create_tables: bool = Field(
        default=True, description="Create missing tables on application startup"
    )
    # Pool sizing, ignored for SQLite
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    password_env_var: str | None = None
    password_file: str | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(
                    f"Environment variable {self.password_env_var} not set"
                )
            return password
        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """The URL with the resolved password filled in."""
        url = make_url(self.url)
        password = self.password
        if password and password != url.password:
            if url.password:
                logger.warning(
                    "Database URL carries a different password than the "
                    "configured secret; using the secret"
                )
            url = url.set(password=password)
        return url.render_as_string(hide_password=False)


class LibraryConfig(BaseModel):
    """Business rules for the lending workflow."""

    loan_period_days: int = Field(
        default=14, ge=1, description="Default loan duration when no due date is given"
    )
    top_borrowed_limit: int = Field(
        default=5, ge=1, description="Number of books in the most-borrowed ranking"
    )
    restore_availability_on_delete: bool = Field(
        default=True,
        description="Give the unit back to the book when an active loan is deleted",
    )


class ConfigData(BaseModel):
    """Root of the ``config:`` document."""

    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    library: LibraryConfig = Field(default_factory=LibraryConfig)
