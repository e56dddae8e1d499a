"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./users.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL points at a SQLite database."""
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def is_memory(self) -> bool:
        """Whether the configured URL is an in-memory SQLite database."""
        return self.is_sqlite and (":memory:" in self.url or self.url == "sqlite://")


class EventsConfig(BaseModel):
    """In-process event dispatcher configuration."""

    max_workers: int = Field(
        default=4, ge=1, description="Worker threads running subscribers"
    )
    shutdown_wait: bool = Field(
        default=True, description="Wait for in-flight subscribers on shutdown"
    )
    shutdown_timeout: float = Field(
        default=10.0, description="Seconds to wait for subscribers to drain"
    )


class EmailConfig(BaseModel):
    """Outbound email provider configuration."""

    enabled: bool = Field(default=False, description="Send emails through the provider")
    api_url: str | None = Field(default=None, description="Provider send endpoint")
    api_key: str | None = Field(default=None, description="Provider API key")
    sender: str = Field(default="no-reply@example.com", description="From address")
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.api_url) and bool(self.api_key)


class NotificationsConfig(BaseModel):
    """Notification subscriber configuration."""

    email: EmailConfig = Field(default_factory=EmailConfig)
    welcome_subject: str = Field(
        default="Welcome aboard!", description="Subject of the welcome email"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    api_prefix: str = Field(default="/api", description="Prefix for API routes")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    events: EventsConfig = Field(
        default_factory=EventsConfig, description="Event dispatcher configuration"
    )
    notifications: NotificationsConfig = Field(
        default_factory=NotificationsConfig,
        description="Notification subscriber configuration",
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
