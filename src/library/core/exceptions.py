"""Domain errors raised by the service layer.

Every error carries the HTTP status the API layer should answer with, so
routers never translate them by hand.
"""


class LibraryError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    """A referenced book, reader or loan does not exist."""

    status_code = 404


class ConflictError(LibraryError):
    """A business rule forbids the operation (duplicate key, no stock...)."""

    status_code = 409


class InvalidRequestError(LibraryError):
    """The request is well formed but semantically wrong."""

    status_code = 400


class InternalError(LibraryError):
    """Unexpected failure. Carries a generic message only."""

    status_code = 500
