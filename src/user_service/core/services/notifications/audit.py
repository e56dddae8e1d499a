"""Registration audit subscriber."""

import threading

from loguru import logger

from src.user_service.entities.core.user import UserCreated


class RegistrationAuditSubscriber:
    """Record registrations in the log and keep a running count."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registrations = 0

    def __call__(self, fact: UserCreated) -> None:
        with self._lock:
            self._registrations += 1
            total = self._registrations
        logger.bind(event="user.registered", user_id=fact.user_id).info(
            "Recorded registration of {} at {} (total {})",
            fact.username,
            fact.occurred_at.isoformat(),
            total,
        )

    @property
    def registrations(self) -> int:
        with self._lock:
            return self._registrations
