"""Error taxonomy for the user service.

Business errors describe a rule the caller broke and are safe to show to
clients. Storage errors signal an infrastructure failure. Subscriber errors
never leave the event dispatcher.
"""

from typing import Any


class UserServiceError(Exception):
    """Base class for all errors raised by the service."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BusinessError(UserServiceError):
    """A business rule rejected the operation."""


class NotFoundError(BusinessError):
    """An id-based lookup did not resolve."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateUsernameError(BusinessError):
    """A user with the requested username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username already exists: {username}")
        self.username = username


class DeleteNotAllowedError(BusinessError):
    """Domain rules forbid deleting the user."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User cannot be deleted: {user_id}")
        self.user_id = user_id


class StorageError(UserServiceError):
    """The entity store failed."""


class DuplicateKeyError(StorageError):
    """The store rejected a write because of a uniqueness constraint."""


class SubscriberError(UserServiceError):
    """A subscriber failed while handling a fact."""

    def __init__(self, subscriber: str, fact: Any, cause: BaseException) -> None:
        super().__init__(
            f"Subscriber {subscriber} failed on {type(fact).__name__}: {cause}"
        )
        self.subscriber = subscriber
        self.fact = fact
        self.cause = cause
