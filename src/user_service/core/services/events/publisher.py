"""Publishers that the domain layer hands facts to."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from loguru import logger
from sqlalchemy import event
from sqlmodel import Session

from src.user_service.core.services.events.dispatcher import EventDispatcher
from src.user_service.entities._base import Fact


@runtime_checkable
class FactPublisher(Protocol):
    def publish(self, fact: Fact) -> None: ...


class TransactionalPublisher:
    """Hold facts until the bound session commits, then forward them.

    Facts are discarded if the session rolls back, so nothing is published
    for a creation that never became visible. Forwarding happens after the
    commit; a failure there is logged and cannot undo it.
    """

    def __init__(self, dispatcher: EventDispatcher, session: Session) -> None:
        self._dispatcher = dispatcher
        self._session = session
        self._pending: list[Fact] = []
        event.listen(session, "after_commit", self._on_commit)
        event.listen(session, "after_soft_rollback", self._on_rollback)

    @property
    def pending(self) -> list[Fact]:
        return list(self._pending)

    def publish(self, fact: Fact) -> None:
        self._pending.append(fact)

    def _on_commit(self, session: Session) -> None:
        facts, self._pending = self._pending, []
        for fact in facts:
            try:
                self._dispatcher.publish(fact)
            except Exception:
                logger.exception("Failed to publish {} after commit", fact.kind)

    def _on_rollback(self, session: Session, previous_transaction) -> None:
        if self._pending:
            logger.info(
                "Transaction rolled back; discarding {} unpublished fact(s)",
                len(self._pending),
            )
        self._pending = []

