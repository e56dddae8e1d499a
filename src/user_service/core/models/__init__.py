"""Command models accepted by the service layer."""

from .commands import CreateUserCommand, DeleteUserCommand, UpdateUserCommand

__all__ = ["CreateUserCommand", "UpdateUserCommand", "DeleteUserCommand"]
