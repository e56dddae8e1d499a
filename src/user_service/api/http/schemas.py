"""Request and response shapes for the users API."""

import time
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.user_service.core.models.commands import CreateUserCommand, UpdateUserCommand
from src.user_service.entities.core.user import User, UserStatus

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Response envelope shared by every endpoint."""

    code: int = 200
    message: str = "success"
    data: T | None = None
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))

    @classmethod
    def success(cls, data: T | None = None, message: str = "success") -> "Result[T]":
        return cls(code=200, message=message, data=data)

    @classmethod
    def fail(cls, code: int, message: str) -> "Result[T]":
        return cls(code=code, message=message, data=None)


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("username must not be blank")
        return value

    def to_command(self) -> CreateUserCommand:
        return CreateUserCommand(username=self.username, email=self.email, phone=self.phone)


class UpdateUserRequest(BaseModel):
    """Partial update; omitted or null fields are left untouched."""

    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)
    status: UserStatus | None = None

    def to_command(self, user_id: str) -> UpdateUserCommand:
        return UpdateUserCommand(id=user_id, **self.model_dump(exclude_unset=True))


def mask_phone(phone: str | None) -> str | None:
    """Hide the middle digits: ``13812345678`` becomes ``138****5678``."""
    if phone is None or len(phone) < 11:
        return phone
    return phone[:3] + "****" + phone[7:]


class UserResponse(BaseModel):
    """Outward-facing view of a user with sensitive fields masked."""

    id: str
    username: str
    email: str | None = None
    phone: str | None = None
    status: UserStatus
    status_text: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            phone=mask_phone(user.phone),
            status=user.status,
            status_text="enabled" if user.is_enabled else "disabled",
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
