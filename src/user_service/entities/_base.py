import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Entity(BaseModel):
    """Base domain entity.

    Identity and timestamps belong to the store: they stay ``None`` until the
    entity has been persisted.
    """

    id: str | None = PydanticField(
        default=None,
        description="Unique identifier assigned by the store",
    )

    created_at: datetime | None = PydanticField(default=None)
    updated_at: datetime | None = PydanticField(default=None)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class EntityTable(SQLModel, table=False):
    """Base table with a store-generated UUID identifier and timestamps."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)


class Fact(BaseModel):
    """Immutable record of something that already happened.

    ``occurred_at`` is fixed when the fact is built, not when it is delivered.
    """

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = PydanticField(default_factory=utc_now)

    @property
    def kind(self) -> str:
        return type(self).__name__
