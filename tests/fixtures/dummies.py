"""Hand-written test doubles for subscribers."""

from __future__ import annotations

import threading
from typing import Any


class RecordingSubscriber:
    """Remember every fact it receives."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.facts: list[Any] = []
        self.threads: list[str] = []

    def __call__(self, fact: Any) -> None:
        with self._lock:
            self.facts.append(fact)
            self.threads.append(threading.current_thread().name)


class FailingSubscriber:
    """Always raise."""

    def __init__(self, message: str = "boom") -> None:
        self.message = message
        self.calls = 0

    def __call__(self, fact: Any) -> None:
        self.calls += 1
        raise RuntimeError(self.message)


class BlockingSubscriber:
    """Block until released, so tests can observe in-flight work."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self.facts: list[Any] = []

    def __call__(self, fact: Any) -> None:
        self.started.set()
        self.release.wait(timeout=5)
        self.facts.append(fact)
