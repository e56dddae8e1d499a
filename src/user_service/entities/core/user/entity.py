"""User domain entity."""

from enum import Enum
from typing import Any

from pydantic import Field

from src.user_service.entities._base import Entity


class UserStatus(str, Enum):
    """Lifecycle status of a user."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class User(Entity):
    """User aggregate root.

    The username is unique and never changes after creation. New users are
    built by the domain service, which always starts them enabled.
    """

    username: str = Field(description="Unique login name")
    email: str | None = Field(default=None, description="User's email address")
    phone: str | None = Field(default=None, description="User's phone number")
    status: UserStatus = Field(default=UserStatus.ENABLED, description="User status")

    @property
    def is_enabled(self) -> bool:
        return self.status == UserStatus.ENABLED

    def enable(self) -> None:
        self.status = UserStatus.ENABLED

    def disable(self) -> None:
        self.status = UserStatus.DISABLED

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity and business attributes.

        Timestamps are part of equality so that two reads with a write in
        between never compare equal.
        """
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.username == other.username
            and self.email == other.email
            and self.phone == other.phone
            and self.status == other.status
            and self.created_at == other.created_at
            and self.updated_at == other.updated_at
        )

    def __hash__(self) -> int:
        return hash((self.id, self.username))
