"""Loguru setup shared by the HTTP app and the CLI."""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.library.runtime.context import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Library loggers that are too chatty at INFO
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # RequestLoggingMiddleware records requests and their failures
        if record.name == "uvicorn.access":
            return
        if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def configure_logging() -> None:
    """Install the console sink, the optional file sink and the stdlib bridge."""
    config = get_config()
    settings = config.logging
    verbose_errors = config.app.environment != "production"

    logger.remove()
    logger.configure(extra={"request_id": "-"})

    logger.add(
        sys.stderr,
        level=settings.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )

    if settings.file:
        path = Path(settings.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        as_json = settings.format == "json"
        logger.add(
            str(path),
            level=settings.level,
            format="{message}" if as_json else CONSOLE_FORMAT,
            serialize=as_json,
            rotation=f"{settings.max_size_mb} MB",
            retention=settings.backup_count,
            compression="zip",
            enqueue=True,
            backtrace=verbose_errors,
            diagnose=verbose_errors,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logger.bind(
        level=settings.level,
        format=settings.format,
        file=settings.file,
        environment=config.app.environment,
    ).info("Logging configured")
