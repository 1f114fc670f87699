"""Shared plumbing for the service layer."""

from collections.abc import Callable
from functools import wraps
from typing import Any, ClassVar, Generic, ParamSpec, TypeVar

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.library.core.exceptions import (
    ConflictError,
    InternalError,
    LibraryError,
    NotFoundError,
)
from src.library.entities.core._base import EntityRepository, EntityT

P = ParamSpec("P")
R = TypeVar("R")


def service_operation(error_message: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Run a service method as one unit of work at the service boundary.

    Domain errors propagate unchanged and a database integrity violation
    becomes a ConflictError. Anything else rolls the session back, is logged
    with its traceback and surfaces as an InternalError carrying
    ``error_message`` only. ``{entity}`` in the message is replaced with the
    service's entity name.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            service = args[0]
            session: Session = service._session
            try:
                return func(*args, **kwargs)
            except LibraryError:
                session.rollback()
                raise
            except IntegrityError as e:
                # A concurrent writer took a unique key after our check
                session.rollback()
                logger.bind(operation=func.__qualname__).warning(
                    "Integrity violation: {}", e.orig
                )
                raise ConflictError("The record conflicts with existing data") from e
            except Exception as e:
                session.rollback()
                message = error_message.format(
                    entity=getattr(service, "entity_name", "record").lower()
                )
                logger.bind(
                    operation=func.__qualname__,
                    error_type=type(e).__name__,
                ).exception(message)
                raise InternalError(message) from e

        return wrapper

    return decorator


class CrudService(Generic[EntityT]):
    """Create/read/update/delete over one entity type.

    Subclasses plug their business rules into ``_check_unique`` (create and
    update) and ``_before_delete``.
    """

    entity_name: ClassVar[str] = "Record"

    def __init__(self, session: Session, repository: EntityRepository[EntityT, Any]) -> None:
        self._session = session
        self._repository = repository

    def _not_found(self, item_id: str) -> NotFoundError:
        return NotFoundError(f"{self.entity_name} with id {item_id} not found")

    def _check_unique(self, entity: EntityT, existing_id: str | None = None) -> None:
        """Raise ConflictError when ``entity`` clashes with another record."""

    def _before_delete(self, item_id: str) -> None:
        """Raise ConflictError to veto a deletion, or clean up dependants."""

    @service_operation("Error while registering the {entity}")
    def create(self, entity: EntityT) -> EntityT:
        self._check_unique(entity)
        created = self._repository.create(entity)
        self._session.commit()
        logger.bind(entity_id=created.id).info(f"{self.entity_name.lower()}.created")
        return created

    @service_operation("Error while listing {entity} records")
    def get_all(self) -> list[EntityT]:
        return self._repository.list_all()

    @service_operation("Error while fetching the {entity}")
    def get(self, item_id: str) -> EntityT:
        entity = self._repository.get(item_id)
        if entity is None:
            raise self._not_found(item_id)
        return entity

    @service_operation("Error while updating the {entity}")
    def update(self, item_id: str, entity: EntityT) -> EntityT:
        if not self._repository.exists(item_id):
            raise self._not_found(item_id)
        entity = entity.model_copy(update={"id": item_id})
        self._check_unique(entity, existing_id=item_id)
        updated = self._repository.update(entity)
        self._session.commit()
        logger.bind(entity_id=item_id).info(f"{self.entity_name.lower()}.updated")
        return updated

    @service_operation("Error while deleting the {entity}")
    def delete(self, item_id: str) -> str:
        if not self._repository.exists(item_id):
            raise self._not_found(item_id)
        self._before_delete(item_id)
        self._repository.delete(item_id)
        self._session.commit()
        logger.bind(entity_id=item_id).info(f"{self.entity_name.lower()}.deleted")
        return f"{self.entity_name} deleted successfully"

    @service_operation("Error while counting {entity} records")
    def count(self) -> int:
        return self._repository.count()
