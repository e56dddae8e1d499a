"""Application service for users.

A thin layer over the store: it picks between direct CRUD and a use case
executor, and owns the transaction boundary of the direct operations.
Registration goes through :class:`RegisterUserExecutor`; update, lookup and
delete are plain CRUD.
"""

from loguru import logger

from src.user_service.core.exceptions import DeleteNotAllowedError, NotFoundError
from src.user_service.core.models.commands import (
    CreateUserCommand,
    DeleteUserCommand,
    UpdateUserCommand,
)
from src.user_service.core.services.database.db_session import DbSessionService
from src.user_service.core.services.events.dispatcher import EventDispatcher
from src.user_service.core.services.user.register_executor import RegisterUserExecutor
from src.user_service.core.services.user.user_domain import UserDomainService
from src.user_service.entities.core.user import User, UserRepository, UserStatus


class UserService:
    def __init__(
        self,
        database_service: DbSessionService,
        dispatcher: EventDispatcher,
        register_executor: RegisterUserExecutor | None = None,
    ):
        self._database_service = database_service
        self._dispatcher = dispatcher
        self._register_executor = register_executor or RegisterUserExecutor(
            database_service, dispatcher
        )

    def create_user(self, command: CreateUserCommand) -> User:
        """Register a user; a compound use case, so delegated to the executor."""
        logger.info("Creating user: {}", command.username)
        return self._register_executor.execute_registration(command)

    def update_user(self, command: UpdateUserCommand) -> User:
        """Apply the explicitly set fields of *command* to an existing user."""
        logger.info("Updating user: {}", command.id)

        with self._database_service.session_scope() as session:
            repository = UserRepository(session)
            user = repository.find_by_id(command.id)
            if user is None:
                raise NotFoundError("User", command.id)

            changes = command.changes()
            if "status" in changes:
                # Route status through the aggregate's own transitions
                if changes.pop("status") is UserStatus.ENABLED:
                    user.enable()
                else:
                    user.disable()
            user = user.model_copy(update=changes)
            user = repository.update(user)

        logger.info("User updated, id: {}", user.id)
        return user

    def get_user_by_id(self, user_id: str) -> User:
        logger.info("Getting user by id: {}", user_id)

        with self._database_service.session_scope() as session:
            user = UserRepository(session).find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_all_users(self) -> list[User]:
        logger.info("Getting all users")

        with self._database_service.session_scope() as session:
            return UserRepository(session).find_all()

    def delete_user(self, user_id: str | DeleteUserCommand) -> None:
        if isinstance(user_id, DeleteUserCommand):
            user_id = user_id.id
        logger.info("Deleting user: {}", user_id)

        with self._database_service.session_scope() as session:
            repository = UserRepository(session)
            if repository.find_by_id(user_id) is None:
                raise NotFoundError("User", user_id)

            domain_service = UserDomainService(repository)
            if not domain_service.can_delete(user_id):
                raise DeleteNotAllowedError(user_id)

            repository.delete_by_id(user_id)

        logger.info("User deleted, id: {}", user_id)
