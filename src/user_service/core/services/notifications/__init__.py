"""Subscribers reacting to user facts."""

from src.user_service.core.services.events.dispatcher import EventDispatcher
from src.user_service.entities.core.user import UserCreated
from src.user_service.runtime.config.config_data import NotificationsConfig

from .audit import RegistrationAuditSubscriber
from .email import WelcomeEmailSubscriber


def register_subscribers(
    dispatcher: EventDispatcher, config: NotificationsConfig
) -> None:
    """Attach the default subscribers to *dispatcher*."""
    dispatcher.subscribe(UserCreated, WelcomeEmailSubscriber(config))
    dispatcher.subscribe(UserCreated, RegistrationAuditSubscriber())


__all__ = [
    "RegistrationAuditSubscriber",
    "WelcomeEmailSubscriber",
    "register_subscribers",
]
