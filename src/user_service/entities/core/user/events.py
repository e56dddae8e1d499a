"""Facts published about users."""

from src.user_service.entities._base import Fact


class UserCreated(Fact):
    """A user was persisted by registration."""

    user_id: str
    username: str
    email: str | None = None
