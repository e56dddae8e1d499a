"""Pytest configuration: expose the shared fixtures to every test module."""

from tests.fixtures import *  # noqa: F401,F403
