"""Welcome email subscriber."""

from __future__ import annotations

import hashlib

import httpx
from loguru import logger

from src.user_service.entities.core.user import UserCreated
from src.user_service.runtime.config.config_data import NotificationsConfig


def _idempotency_key(fact: UserCreated) -> str:
    """Stable key so the provider won't send twice for one registration."""
    payload_hash = hashlib.sha256(
        f"{fact.user_id}\x1f{fact.email}".encode("utf-8")
    ).hexdigest()
    return f"welcome:{fact.user_id}:{payload_hash[:16]}"


class WelcomeEmailSubscriber:
    """Send a welcome email when a user registers.

    Without a configured provider the email is only logged. Provider failures
    are logged and swallowed here; the registration has already committed.
    """

    def __init__(
        self,
        config: NotificationsConfig,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._client = client

    def __call__(self, fact: UserCreated) -> None:
        if not fact.email:
            logger.info("User {} has no email; skipping welcome email", fact.user_id)
            return

        subject = self._config.welcome_subject
        body = f"Dear {fact.username}, welcome! Your account is ready."

        email_config = self._config.email
        if not email_config.is_configured:
            logger.info(
                "Welcome email to {} (user {}): {}", fact.email, fact.username, subject
            )
            return

        payload = {
            "from": {"email": email_config.sender},
            "personalizations": [{"to": [{"email": fact.email}], "subject": subject}],
            "content": [{"type": "text/plain", "value": body}],
        }
        headers = {
            "Authorization": f"Bearer {email_config.api_key}",
            "Idempotency-Key": _idempotency_key(fact),
            "Content-Type": "application/json",
        }

        try:
            resp = self._post(email_config.api_url, payload, headers, email_config.timeout)
        except httpx.HTTPError as e:
            logger.error("Welcome email to {} failed: {}", fact.email, e)
            return

        if 200 <= resp.status_code < 300:
            logger.info("Welcome email sent to {}", fact.email)
            return

        logger.error(
            "Welcome email to {} rejected {}: {}",
            fact.email,
            resp.status_code,
            resp.text[:200],
        )

    def _post(
        self, url: str, payload: dict, headers: dict[str, str], timeout: float
    ) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, json=payload, headers=headers, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.post(url, json=payload, headers=headers)
