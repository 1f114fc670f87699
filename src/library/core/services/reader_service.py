"""Reader registry rules."""

from loguru import logger
from sqlmodel import Session

from src.library.core.exceptions import ConflictError
from src.library.core.services.base import CrudService
from src.library.entities.service.loan import LoanRepository, LoanStatus
from src.library.entities.service.reader import Reader, ReaderRepository


class ReaderService(CrudService[Reader]):
    entity_name = "Reader"

    def __init__(self, session: Session) -> None:
        self._readers = ReaderRepository(session)
        self._loans = LoanRepository(session)
        super().__init__(session, self._readers)

    def _check_unique(self, entity: Reader, existing_id: str | None = None) -> None:
        if entity.national_id and self._readers.exists_by_national_id(
            entity.national_id, exclude_id=existing_id
        ):
            raise ConflictError(
                f"A reader with national id '{entity.national_id}' already exists"
            )

    def _before_delete(self, item_id: str) -> None:
        active = self._loans.count_for_reader(item_id, LoanStatus.ACTIVE)
        if active:
            raise ConflictError(
                f"Reader with id {item_id} has {active} active loan(s) and cannot be deleted"
            )
        removed = self._loans.delete_for_reader(item_id)
        if removed:
            logger.bind(reader_id=item_id, loans=removed).info("reader.history_removed")
