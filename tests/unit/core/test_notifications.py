"""Unit tests for the user fact subscribers."""

from unittest.mock import Mock, patch

import httpx
import pytest

from src.user_service.core.services import (
    EventDispatcher,
    RegistrationAuditSubscriber,
    WelcomeEmailSubscriber,
    register_subscribers,
)
from src.user_service.entities.core.user import UserCreated
from src.user_service.runtime.config.config_data import EmailConfig, NotificationsConfig


def _fact(email: str | None = "a@x.com") -> UserCreated:
    return UserCreated(user_id="u-1", username="alice", email=email)


@pytest.fixture
def configured() -> NotificationsConfig:
    return NotificationsConfig(
        email=EmailConfig(
            enabled=True,
            api_url="https://mail.test/v3/send",
            api_key="secret",
            sender="hello@example.com",
            timeout=3.0,
        ),
        welcome_subject="Hi there",
    )


class TestWelcomeEmailSubscriber:
    def test_skips_users_without_email(self, configured: NotificationsConfig):
        client = Mock(spec=httpx.Client)

        WelcomeEmailSubscriber(configured, client=client)(_fact(email=None))

        client.post.assert_not_called()

    def test_only_logs_without_provider(self):
        client = Mock(spec=httpx.Client)

        WelcomeEmailSubscriber(NotificationsConfig(), client=client)(_fact())

        client.post.assert_not_called()

    def test_posts_to_provider(self, configured: NotificationsConfig):
        client = Mock(spec=httpx.Client)
        client.post.return_value = httpx.Response(202)

        WelcomeEmailSubscriber(configured, client=client)(_fact())

        client.post.assert_called_once()
        args, kwargs = client.post.call_args
        assert args[0] == "https://mail.test/v3/send"
        assert kwargs["timeout"] == 3.0
        payload = kwargs["json"]
        assert payload["from"] == {"email": "hello@example.com"}
        assert payload["personalizations"][0]["to"] == [{"email": "a@x.com"}]
        assert payload["personalizations"][0]["subject"] == "Hi there"
        assert "alice" in payload["content"][0]["value"]
        headers = kwargs["headers"]
        assert headers["Authorization"] == "Bearer secret"
        assert headers["Idempotency-Key"].startswith("welcome:u-1:")

    def test_idempotency_key_is_stable(self, configured: NotificationsConfig):
        client = Mock(spec=httpx.Client)
        client.post.return_value = httpx.Response(200)
        subscriber = WelcomeEmailSubscriber(configured, client=client)

        subscriber(_fact())
        subscriber(_fact())

        keys = [c.kwargs["headers"]["Idempotency-Key"] for c in client.post.call_args_list]
        assert keys[0] == keys[1]

    def test_transport_error_is_swallowed(self, configured: NotificationsConfig):
        client = Mock(spec=httpx.Client)
        client.post.side_effect = httpx.ConnectError("connection refused")

        WelcomeEmailSubscriber(configured, client=client)(_fact())

        client.post.assert_called_once()

    def test_rejection_is_swallowed(self, configured: NotificationsConfig):
        client = Mock(spec=httpx.Client)
        client.post.return_value = httpx.Response(500, text="provider down")

        WelcomeEmailSubscriber(configured, client=client)(_fact())

    def test_uses_short_lived_client_by_default(self, configured: NotificationsConfig):
        with patch(
            "src.user_service.core.services.notifications.email.httpx.Client"
        ) as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.post.return_value = httpx.Response(200)

            WelcomeEmailSubscriber(configured)(_fact())

        client_cls.assert_called_once_with(timeout=3.0)
        client.post.assert_called_once()


class TestRegistrationAuditSubscriber:
    def test_counts_registrations(self):
        audit = RegistrationAuditSubscriber()

        audit(_fact())
        audit(_fact(email=None))

        assert audit.registrations == 2


class TestRegisterSubscribers:
    def test_attaches_default_subscribers(self):
        dispatcher = EventDispatcher(max_workers=1)
        try:
            register_subscribers(dispatcher, NotificationsConfig())
            kinds = {type(s) for s in dispatcher.subscribers(UserCreated)}
        finally:
            dispatcher.shutdown()

        assert kinds == {WelcomeEmailSubscriber, RegistrationAuditSubscriber}
