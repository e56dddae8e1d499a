from __future__ import annotations

from collections.abc import Generator

import pytest
from sqlalchemy import Engine, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.user_service.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    EventsConfig,
    LoggingConfig,
)


@pytest.fixture
def test_config() -> ConfigData:
    """Configuration for tests: in-memory database, console-only logging."""
    return ConfigData(
        app=AppConfig(environment="test"),
        logging=LoggingConfig(level="DEBUG", format="plain", file=None),
        database=DatabaseConfig(url="sqlite://"),
        events=EventsConfig(max_workers=2, shutdown_timeout=5.0),
    )


@pytest.fixture
def engine() -> Generator[Engine]:
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.user_service.entities.core.user import UserTable  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session]:
    """Create a database session for repository-level tests."""
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()
