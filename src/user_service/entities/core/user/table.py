"""User database table model."""

from sqlmodel import Field

from src.user_service.entities._base import EntityTable
from src.user_service.entities.core.user.entity import UserStatus


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    The unique index on ``username`` backs up the domain service's
    check-then-create, which is not atomic on its own.
    """

    __tablename__ = "users"

    username: str = Field(index=True, unique=True, nullable=False)
    email: str | None = None
    phone: str | None = None
    status: str = Field(default=UserStatus.ENABLED.value, nullable=False)
