"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.user_service.core.exceptions import StorageError
from src.user_service.runtime.config.config_data import ConfigData
from src.user_service.runtime.context import get_config


class DbSessionService:
    def __init__(self, engine: Engine | None = None, config: ConfigData | None = None):
        """Initialize the shared database engine and session factory.

        An explicit ``engine`` takes precedence over the configured URL.
        """
        main_config = config or get_config()
        self._config = main_config

        if engine is not None:
            self._engine = engine
            return

        logger.info("Setting up database engine and session factory")
        db_config = main_config.database
        engine_kwargs = self._get_engine_kwargs(main_config)

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )
        self._engine = create_engine(db_config.url, **engine_kwargs)

        if main_config.app.environment == "production":
            logger.info(
                "Database engine initialized",
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            )

    @property
    def engine(self) -> Engine:
        return self._engine

    def _get_engine_kwargs(self, config: ConfigData) -> dict[str, Any]:
        """Get database-specific engine arguments."""
        db_config = config.database
        engine_kwargs: dict[str, Any] = {"echo": db_config.echo}

        if db_config.is_sqlite:
            engine_kwargs["connect_args"] = {
                # Subscribers and the threadpool share connections
                "check_same_thread": False,
                "timeout": 20,
            }
            if db_config.is_memory:
                # One connection, or every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool
            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
            return engine_kwargs

        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }
        )
        if "postgresql" in db_config.url:
            engine_kwargs["connect_args"] = {
                "application_name": f"{config.app.environment}_user_service",
                "connect_timeout": 30,
            }
        return engine_kwargs

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Entities are read after commit
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """One unit of work: commit on success, roll back on any error.

        Raw SQLAlchemy failures leave this scope as :class:`StorageError`.
        """
        db = self.get_session()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StorageError("Database transaction failed") from e
        except Exception as e:
            db.rollback()
            logger.debug(
                "Transaction rolled back",
                error_type=type(e).__name__,
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }
