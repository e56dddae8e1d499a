"""Core services exports."""

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Event Services
from .events.dispatcher import EventDispatcher
from .events.publisher import FactPublisher, TransactionalPublisher

# Subscribers
from .notifications import (
    RegistrationAuditSubscriber,
    WelcomeEmailSubscriber,
    register_subscribers,
)

# User Services
from .user.register_executor import RegisterUserExecutor
from .user.user_domain import UserDomainService
from .user.user_service import UserService

__all__ = [
    # Database Service
    "DbManageService",
    "DbSessionService",
    # Event Services
    "EventDispatcher",
    "FactPublisher",
    "TransactionalPublisher",
    # Subscribers
    "RegistrationAuditSubscriber",
    "WelcomeEmailSubscriber",
    "register_subscribers",
    # User Services
    "RegisterUserExecutor",
    "UserDomainService",
    "UserService",
]
