"""Entities organised by business concept.

Each entity package holds its domain model, table, repository and facts.
"""

from ._base import Entity, EntityTable, Fact
from .core.user import User, UserCreated, UserRepository, UserStatus, UserTable

__all__ = [
    "Entity",
    "EntityTable",
    "Fact",
    "User",
    "UserCreated",
    "UserRepository",
    "UserStatus",
    "UserTable",
]
