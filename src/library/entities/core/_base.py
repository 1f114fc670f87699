import uuid
from datetime import UTC, datetime
from typing import ClassVar, Generic, TypeVar

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, Session, SQLModel, func, select


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to an aware UTC value.

    SQLite hands back naive datetimes; those are assumed to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utc_now)
    updated_at: datetime = PydanticField(default_factory=utc_now)


class EntityTable(SQLModel, table=False):
    """Base table class with auto-generated UUID identifier."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )


EntityT = TypeVar("EntityT", bound=Entity)
TableT = TypeVar("TableT", bound=EntityTable)


class EntityRepository(Generic[EntityT, TableT]):
    """Data-access layer shared by every entity.

    Subclasses only name the domain model and the table model; rows never
    leave the repository, callers always receive domain entities.
    """

    entity_type: ClassVar[type[Entity]]
    table_type: ClassVar[type[EntityTable]]

    # Fields owned by the persistence layer, never copied from an update
    _immutable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_at", "updated_at"}
    )

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: TableT) -> EntityT:
        return self.entity_type.model_validate(row, from_attributes=True)

    def _order_by(self) -> tuple:
        return (self.table_type.created_at, self.table_type.id)

    def get(self, item_id: str) -> EntityT | None:
        row = self._session.get(self.table_type, item_id)
        if row is None:
            return None
        return self._to_entity(row)

    def exists(self, item_id: str) -> bool:
        statement = select(self.table_type.id).where(self.table_type.id == item_id)
        return self._session.exec(statement).first() is not None

    def create(self, entity: EntityT) -> EntityT:
        row = self.table_type.model_validate(entity, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, entity: EntityT) -> EntityT:
        row = self._session.get(self.table_type, entity.id)
        if row is None:
            raise ValueError(f"{self.entity_type.__name__} {entity.id} not found")

        columns = self.table_type.model_fields.keys() - self._immutable_fields
        for key, value in entity.model_dump(include=set(columns)).items():
            setattr(row, key, value)
        row.updated_at = utc_now()

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, item_id: str) -> bool:
        row = self._session.get(self.table_type, item_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_all(self) -> list[EntityT]:
        statement = select(self.table_type).order_by(*self._order_by())
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def count(self) -> int:
        statement = select(func.count()).select_from(self.table_type)
        return self._session.exec(statement).one()
