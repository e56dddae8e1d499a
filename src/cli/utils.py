"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

from src.user_service.api.http.app_data import ApplicationDependencies, build_dependencies
from src.user_service.runtime.context import get_config

console = Console()


@contextmanager
def service_dependencies() -> Iterator[ApplicationDependencies]:
    """Build the service graph for one command and drain subscribers after."""
    config = get_config()
    deps = build_dependencies(config)
    try:
        yield deps
    finally:
        deps.dispatcher.wait_for_idle(config.events.shutdown_timeout)
        deps.dispatcher.shutdown(wait=True)
