"""FastAPI application: middleware, error translation and routers."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from src.library.api.http.app_data import ApplicationDependencies
from src.library.api.http.routers import health
from src.library.api.http.routers.service import book, loan, reader
from src.library.api.utils.app_startup import configure_logging
from src.library.core.exceptions import LibraryError
from src.library.core.services import DbManageService, DbSessionService
from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.context import get_config

configure_logging()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with a correlation id and echo it back.

    Anything that logs while the request is handled carries the same
    ``request_id``; an unhandled exception becomes a bare 500.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            client_ip = forwarded.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else "unknown"

        started = time.perf_counter()
        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
        ):
            logger.info("request.start")
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.bind(
                    status_code=500,
                    duration_ms=_elapsed_ms(started),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                response = JSONResponse(
                    status_code=500,
                    content={"detail": "Internal Server Error"},
                )
            else:
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(started),
                ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


def _check_cors(config: ConfigData) -> None:
    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )


async def startup() -> None:
    config = get_config()
    logger.info("Starting {} in {} environment", config.app.name, config.app.environment)

    database_service = DbSessionService()
    if config.database.create_tables:
        DbManageService(database_service.engine).create_all()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


_config = get_config()
_check_cors(_config)
_public_docs = _config.app.environment != "production"

app = FastAPI(
    title="Library API",
    lifespan=lifespan,
    docs_url="/docs" if _public_docs else None,
    redoc_url="/redoc" if _public_docs else None,
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.app.cors.origins,
    allow_credentials=_config.app.cors.allow_credentials,
    allow_methods=_config.app.cors.allow_methods,
    allow_headers=_config.app.cors.allow_headers,
)
# Added last so it wraps everything else
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    logger.bind(
        status_code=exc.status_code,
        error_type=type(exc).__name__,
    ).info("request.rejected: {}", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(health.router)
app.include_router(book.router)
app.include_router(reader.router)
app.include_router(loan.router)

__all__ = ["app", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=_config.app.host, port=_config.app.port, access_log=False)
