"""Registration use case."""

from loguru import logger

from src.user_service.core.models.commands import CreateUserCommand
from src.user_service.core.services.database.db_session import DbSessionService
from src.user_service.core.services.events.dispatcher import EventDispatcher
from src.user_service.core.services.events.publisher import TransactionalPublisher
from src.user_service.core.services.user.user_domain import UserDomainService
from src.user_service.entities.core.user import User, UserRepository


class RegisterUserExecutor:
    """Run registration as one unit of work.

    A use case spans domain logic and fact emission, as opposed to a bare
    CRUD call. The whole step runs in a single transaction. Facts reach the
    dispatcher only after that transaction commits; subscribers then run on
    their own and cannot affect the returned user.
    """

    def __init__(self, database_service: DbSessionService, dispatcher: EventDispatcher):
        self._database_service = database_service
        self._dispatcher = dispatcher

    def execute_registration(self, command: CreateUserCommand) -> User:
        logger.info("Executing registration use case: {}", command.username)

        with self._database_service.session_scope() as session:
            publisher = TransactionalPublisher(self._dispatcher, session)
            domain_service = UserDomainService(UserRepository(session), publisher)
            user = domain_service.register_user(
                command.username, command.email, command.phone
            )

        logger.info("Registration use case completed, userId: {}", user.id)
        return user
