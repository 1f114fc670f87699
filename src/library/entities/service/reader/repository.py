"""Reader data-access layer."""

from sqlmodel import select

from src.library.entities.core._base import EntityRepository

from .entity import Reader
from .table import ReaderTable


class ReaderRepository(EntityRepository[Reader, ReaderTable]):
    """Data-access layer for readers."""

    entity_type = Reader
    table_type = ReaderTable

    def exists_by_national_id(
        self, national_id: str, exclude_id: str | None = None
    ) -> bool:
        statement = select(ReaderTable.id).where(ReaderTable.national_id == national_id)
        if exclude_id is not None:
            statement = statement.where(ReaderTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def _order_by(self) -> tuple:
        return (ReaderTable.name, ReaderTable.id)
