"""Unit tests for the user entity package.

Covers the domain model, the immutable fact and the repository sitting on
top of the SQLModel table.
"""

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from src.user_service.core.exceptions import DuplicateKeyError, StorageError
from src.user_service.entities.core.user import (
    User,
    UserCreated,
    UserRepository,
    UserStatus,
)


class TestUser:
    """Test the User domain entity."""

    def test_new_user_defaults(self):
        """An unsaved user has no identity and starts enabled."""
        user = User(username="alice")

        assert user.id is None
        assert user.created_at is None
        assert user.status is UserStatus.ENABLED
        assert user.is_enabled
        assert user.email is None
        assert user.phone is None

    def test_enable_disable(self):
        user = User(username="alice")

        user.disable()
        assert user.status is UserStatus.DISABLED
        assert not user.is_enabled

        user.enable()
        assert user.is_enabled

    def test_status_accepts_wire_value(self):
        user = User(username="alice", status="disabled")
        assert user.status is UserStatus.DISABLED

    def test_naive_timestamps_become_utc(self):
        """SQLite hands back naive datetimes; the entity reads them as UTC."""
        user = User(username="alice", created_at=datetime(2024, 1, 1, 12, 0))
        assert user.created_at.tzinfo is UTC

    def test_equality_includes_timestamps(self):
        now = datetime.now(UTC)
        a = User(id="1", username="alice", created_at=now, updated_at=now)
        b = User(id="1", username="alice", created_at=now, updated_at=now)
        c = a.model_copy(update={"updated_at": datetime(2030, 1, 1, tzinfo=UTC)})

        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert a != "alice"


class TestUserCreated:
    """Test the UserCreated fact."""

    def test_fact_is_frozen(self):
        fact = UserCreated(user_id="1", username="alice", email="a@x.com")

        with pytest.raises(ValidationError):
            fact.username = "bob"

    def test_occurred_at_set_on_construction(self):
        before = datetime.now(UTC)
        fact = UserCreated(user_id="1", username="alice", email=None)

        assert before <= fact.occurred_at <= datetime.now(UTC)
        assert fact.kind == "UserCreated"


class TestUserRepository:
    """Test the repository against an in-memory database."""

    @pytest.fixture
    def repo(self, session: Session) -> UserRepository:
        return UserRepository(session)

    def test_create_assigns_identity_and_timestamps(self, repo: UserRepository):
        user = repo.create(User(username="alice", email="a@x.com", phone="111"))

        assert user.id is not None
        assert user.created_at is not None
        assert user.created_at.tzinfo is not None
        assert user.updated_at == user.created_at
        assert user.status is UserStatus.ENABLED

    def test_find_by_id_and_username(self, repo: UserRepository):
        created = repo.create(User(username="alice"))

        assert repo.find_by_id(created.id) == created
        assert repo.find_by_username("alice") == created
        assert repo.find_by_id("missing") is None
        assert repo.find_by_username("bob") is None

    def test_exists_and_count(self, repo: UserRepository):
        assert not repo.exists_by_username("alice")
        assert repo.count() == 0

        repo.create(User(username="alice"))

        assert repo.exists_by_username("alice")
        assert repo.count() == 1

    def test_find_all_in_creation_order(self, repo: UserRepository):
        for name in ("carol", "alice", "bob"):
            repo.create(User(username=name))

        assert [u.username for u in repo.find_all()] == ["carol", "alice", "bob"]

    def test_duplicate_username_hits_unique_constraint(self, repo: UserRepository):
        repo.create(User(username="alice"))

        with pytest.raises(DuplicateKeyError):
            repo.create(User(username="alice"))

    def test_other_constraint_failures_are_not_duplicates(self):
        session = Mock(spec=Session)
        session.flush.side_effect = IntegrityError(
            "INSERT INTO users", {}, Exception("NOT NULL constraint failed: users.status")
        )

        with pytest.raises(StorageError) as exc_info:
            UserRepository(session).create(User(username="alice"))

        assert not isinstance(exc_info.value, DuplicateKeyError)

    def test_duplicate_key_is_a_storage_error(self):
        assert issubclass(DuplicateKeyError, StorageError)

    def test_update_changes_mutable_fields_only(self, repo: UserRepository):
        created = repo.create(User(username="alice", email="a@x.com", phone="111"))

        changed = created.model_copy(
            update={
                "username": "mallory",
                "email": "new@x.com",
                "status": UserStatus.DISABLED,
            }
        )
        updated = repo.update(changed)

        assert updated.username == "alice"
        assert updated.email == "new@x.com"
        assert updated.phone == "111"
        assert updated.status is UserStatus.DISABLED
        assert updated.created_at == created.created_at

    def test_updated_at_strictly_increases(self, repo: UserRepository):
        user = repo.create(User(username="alice"))

        stamps = [user.updated_at]
        for _ in range(5):
            user = repo.update(user)
            stamps.append(user.updated_at)

        assert all(a < b for a, b in zip(stamps, stamps[1:], strict=False))
        assert user.updated_at > user.created_at

    def test_delete_by_id(self, repo: UserRepository):
        user = repo.create(User(username="alice"))

        repo.delete_by_id(user.id)
        repo.delete_by_id("missing")

        assert repo.find_by_id(user.id) is None

    def test_sqlalchemy_failures_become_storage_errors(self, session: Session):
        repo = UserRepository(session)
        session.exec = _raise_operational_error

        with pytest.raises(StorageError):
            repo.find_all()
        with pytest.raises(StorageError):
            repo.exists_by_username("alice")


def _raise_operational_error(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))
