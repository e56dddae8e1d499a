from .register_executor import RegisterUserExecutor
from .user_domain import UserDomainService
from .user_service import UserService

__all__ = ["RegisterUserExecutor", "UserDomainService", "UserService"]
