"""Commands: intended state changes that have not been applied yet.

Inputs arrive here already syntactically validated by the HTTP layer; the
service only enforces business rules.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.user_service.entities.core.user import UserStatus


class CreateUserCommand(BaseModel):
    """Register a new user."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(description="Unique login name")
    email: str | None = Field(default=None, description="Email address")
    phone: str | None = Field(default=None, description="Phone number")


class UpdateUserCommand(BaseModel):
    """Partially update a user.

    Omitted and ``None`` fields leave the stored value untouched. Any other
    value is applied, including the empty string.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="User to update")
    email: str | None = Field(default=None, description="New email address")
    phone: str | None = Field(default=None, description="New phone number")
    status: UserStatus | None = Field(default=None, description="New status")

    def changes(self) -> dict[str, Any]:
        """The fields to apply, excluding the target id."""
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})


class DeleteUserCommand(BaseModel):
    """Delete a user."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="User to delete")
