"""In-process fact dispatcher.

Subscribers register for a concrete :class:`Fact` subclass. ``publish`` hands
each subscriber to a worker thread and returns immediately; the publisher
never observes subscriber results or failures.

Delivery is best-effort: no ordering across subscribers, no retries, nothing
persisted. A failing subscriber is logged, counted and dropped. Facts still
queued when the process stops are lost.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections import defaultdict
from collections.abc import Awaitable, Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Any

from loguru import logger

from src.user_service.core.exceptions import SubscriberError
from src.user_service.entities._base import Fact

Subscriber = Callable[[Any], None] | Callable[[Any], Awaitable[None]]
ErrorCallback = Callable[[SubscriberError], None]


def subscriber_name(subscriber: Subscriber) -> str:
    name = getattr(subscriber, "__qualname__", None)
    if name is None:
        name = type(subscriber).__qualname__
    return f"{getattr(subscriber, '__module__', '?')}.{name}"


class EventDispatcher:
    """Deliver facts to subscribers on a thread pool.

    Args:
        max_workers: Size of the worker pool running subscribers.
        on_subscriber_error: Optional hook receiving every
            :class:`SubscriberError`, for alerting or metrics. Errors raised by
            the hook itself are logged and ignored.
    """

    def __init__(
        self,
        max_workers: int = 4,
        on_subscriber_error: ErrorCallback | None = None,
    ) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="fact-subscriber"
        )
        self._subscribers: dict[type[Fact], list[Subscriber]] = defaultdict(list)
        self._on_subscriber_error = on_subscriber_error
        self._lock = threading.Lock()
        self._in_flight: set[Future] = set()
        self._error_counts: dict[str, int] = defaultdict(int)
        self._delivered = 0
        self._closed = False

    # -- Registration ------------------------------------------------------

    def subscribe(self, fact_type: type[Fact], subscriber: Subscriber) -> None:
        """Register *subscriber* for facts of exactly *fact_type*."""
        with self._lock:
            self._subscribers[fact_type].append(subscriber)
        logger.debug(
            "Subscribed {} to {}", subscriber_name(subscriber), fact_type.__name__
        )

    def unsubscribe(self, fact_type: type[Fact], subscriber: Subscriber) -> None:
        with self._lock:
            handlers = self._subscribers.get(fact_type, [])
            if subscriber in handlers:
                handlers.remove(subscriber)

    def subscribers(self, fact_type: type[Fact]) -> list[Subscriber]:
        with self._lock:
            return list(self._subscribers.get(fact_type, []))

    # -- Publishing --------------------------------------------------------

    def publish(self, fact: Fact) -> None:
        """Schedule every subscriber of ``type(fact)`` and return at once."""
        handlers = self.subscribers(type(fact))
        if not handlers:
            logger.debug("No subscribers for {}", fact.kind)
            return

        for handler in handlers:
            try:
                future = self._executor.submit(self._deliver, handler, fact)
            except RuntimeError:
                # Executor already shut down
                logger.warning(
                    "Dispatcher closed; dropping {} for {}",
                    fact.kind,
                    subscriber_name(handler),
                )
                continue
            with self._lock:
                self._in_flight.add(future)
            future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._in_flight.discard(future)

    def _deliver(self, handler: Subscriber, fact: Fact) -> None:
        name = subscriber_name(handler)
        try:
            if inspect.iscoroutinefunction(handler):
                asyncio.run(handler(fact))
            else:
                result = handler(fact)
                if inspect.isawaitable(result):
                    asyncio.run(_await(result))
        except Exception as exc:
            self._handle_failure(SubscriberError(name, fact, exc))
            return
        with self._lock:
            self._delivered += 1

    def _handle_failure(self, error: SubscriberError) -> None:
        with self._lock:
            self._error_counts[error.subscriber] += 1
        logger.opt(exception=error.cause).error(
            "Subscriber {} failed on {}; fact dropped",
            error.subscriber,
            type(error.fact).__name__,
        )
        if self._on_subscriber_error is not None:
            try:
                self._on_subscriber_error(error)
            except Exception:
                logger.exception("on_subscriber_error callback failed")

    # -- Lifecycle ---------------------------------------------------------

    def wait_for_idle(self, timeout: float | None = None) -> bool:
        """Block until all scheduled deliveries finish.

        Returns ``False`` if *timeout* elapsed first.
        """
        with self._lock:
            pending = list(self._in_flight)
        if not pending:
            return True
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting facts. Queued deliveries run unless *cancel_pending*."""
        if self._closed:
            return
        self._closed = True
        logger.info(
            "Shutting down event dispatcher (in flight: {})", len(self._in_flight)
        )
        self._executor.shutdown(wait=wait, cancel_futures=cancel_pending)

    @property
    def closed(self) -> bool:
        return self._closed

    # -- Observability -----------------------------------------------------

    def get_error_counts(self) -> dict[str, int]:
        """Return ``{subscriber_name: failure_count}``."""
        with self._lock:
            return dict(self._error_counts)

    @property
    def delivered(self) -> int:
        """Deliveries that completed without raising."""
        with self._lock:
            return self._delivered


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
