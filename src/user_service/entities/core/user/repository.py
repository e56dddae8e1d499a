"""User data access layer."""

from datetime import timedelta

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, func, select

from src.user_service.core.exceptions import DuplicateKeyError, StorageError
from src.user_service.entities._base import as_utc, utc_now
from src.user_service.entities.core.user.entity import User
from src.user_service.entities.core.user.table import UserTable


def _is_username_conflict(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: users.username"
    # PostgreSQL: "duplicate key value violates unique constraint \"ix_users_username\""
    message = str(error.orig).lower()
    return ("unique" in message or "duplicate" in message) and "username" in message


class UserRepository:
    """Data-access layer for users.

    Every SQLAlchemy failure is surfaced as :class:`StorageError`; a unique
    violation on ``username`` as the narrower :class:`DuplicateKeyError`.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: UserTable) -> User:
        return User.model_validate(row, from_attributes=True)

    def find_by_id(self, user_id: str) -> User | None:
        try:
            row = self._session.get(UserTable, user_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load user {user_id}") from e
        if row is None:
            return None
        return self._to_entity(row)

    def find_by_username(self, username: str) -> User | None:
        statement = select(UserTable).where(UserTable.username == username)
        try:
            row = self._session.exec(statement).first()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load user {username!r}") from e
        if row is None:
            return None
        return self._to_entity(row)

    def find_all(self) -> list[User]:
        statement = select(UserTable).order_by(UserTable.created_at, UserTable.id)
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as e:
            raise StorageError("Failed to list users") from e
        return [self._to_entity(row) for row in rows]

    def exists_by_username(self, username: str) -> bool:
        statement = (
            select(func.count())
            .select_from(UserTable)
            .where(UserTable.username == username)
        )
        try:
            count = self._session.exec(statement).one()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to check username {username!r}") from e
        return count > 0

    def count(self) -> int:
        try:
            return self._session.exec(select(func.count()).select_from(UserTable)).one()
        except SQLAlchemyError as e:
            raise StorageError("Failed to count users") from e

    def create(self, user: User) -> User:
        """Insert a new user; the store assigns the id and both timestamps."""
        now = utc_now()
        row = UserTable(
            username=user.username,
            email=user.email,
            phone=user.phone,
            status=user.status.value,
            created_at=now,
            updated_at=now,
        )
        self._session.add(row)
        try:
            # Flush now so constraint violations surface inside this call
            self._session.flush()
        except IntegrityError as e:
            if not _is_username_conflict(e):
                raise StorageError(f"Failed to create user {user.username!r}") from e
            logger.warning("Username {} rejected by unique constraint", user.username)
            raise DuplicateKeyError(f"Duplicate key for user {user.username!r}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create user {user.username!r}") from e
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, user: User) -> User:
        """Write mutable fields back and advance ``updated_at``.

        The username and creation time are never touched.
        """
        try:
            row = self._session.get(UserTable, user.id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load user {user.id}") from e
        if row is None:
            raise StorageError(f"User vanished during update: {user.id}")

        now = utc_now()
        previous = as_utc(row.updated_at)
        if now <= previous:
            now = previous + timedelta(microseconds=1)

        row.email = user.email
        row.phone = user.phone
        row.status = user.status.value
        row.updated_at = now
        self._session.add(row)
        try:
            self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update user {user.id}") from e
        self._session.refresh(row)
        return self._to_entity(row)

    def delete_by_id(self, user_id: str) -> None:
        try:
            row = self._session.get(UserTable, user_id)
            if row is not None:
                self._session.delete(row)
                self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete user {user_id}") from e
