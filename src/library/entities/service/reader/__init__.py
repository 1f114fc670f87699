"""Entity package: Reader."""

from .entity import Reader
from .repository import ReaderRepository
from .table import ReaderTable

__all__ = ["Reader", "ReaderRepository", "ReaderTable"]
