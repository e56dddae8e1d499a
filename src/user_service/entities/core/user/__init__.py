"""User entity module.

- User / UserStatus: domain entity
- UserTable: database persistence model
- UserRepository: data access layer
- UserCreated: fact published after registration commits
"""

from .entity import User, UserStatus
from .events import UserCreated
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserStatus", "UserTable", "UserRepository", "UserCreated"]
