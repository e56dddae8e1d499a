from loguru import logger

from src.user_service.core.exceptions import DuplicateKeyError, DuplicateUsernameError
from src.user_service.core.services.events.publisher import FactPublisher
from src.user_service.entities.core.user import (
    User,
    UserCreated,
    UserRepository,
    UserStatus,
)


class UserDomainService:
    """Domain rules for the user aggregate.

    The only place users are created. Uniqueness is checked before the
    insert; the store's unique constraint catches the race between two
    concurrent registrations of the same name.

    The publisher is only needed for registration; checks such as
    :meth:`can_delete` run without one.
    """

    def __init__(
        self, repository: UserRepository, publisher: FactPublisher | None = None
    ):
        self._repository = repository
        self._publisher = publisher

    def register_user(
        self, username: str, email: str | None, phone: str | None
    ) -> User:
        """Create an enabled user and publish :class:`UserCreated`.

        Raises:
            DuplicateUsernameError: The username is already taken.
            StorageError: The store failed; nothing is published.
        """
        if self._publisher is None:
            raise RuntimeError("Registration requires a fact publisher")
        logger.info("Registering new user: {}", username)

        if self._repository.exists_by_username(username):
            raise DuplicateUsernameError(username)

        user = User(username=username, email=email, phone=phone, status=UserStatus.ENABLED)
        try:
            user = self._repository.create(user)
        except DuplicateKeyError as e:
            logger.warning("Concurrent registration lost the race for {}", username)
            raise DuplicateUsernameError(username) from e

        self._publisher.publish(
            UserCreated(user_id=user.id, username=user.username, email=user.email)
        )

        logger.info("User registered, id: {}", user.id)
        return user

    def can_delete(self, user_id: str) -> bool:
        """Whether domain rules allow deleting the user.

        No rule forbids deletion yet; this is where checks such as open
        orders or outstanding balances belong.
        """
        return True
