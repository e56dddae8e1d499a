"""Loading of config.yaml with environment variable placeholders."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.user_service.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _resolve(expression: str) -> str:
    if ":-" in expression:
        name, default = expression.split(":-", 1)
        return os.getenv(name, default)

    if ":?" in expression:
        name, message = expression.split(":?", 1)
        value = os.getenv(name)
        if value is None:
            raise ValueError(f"Required environment variable {name}: {message}")
        return value

    value = os.getenv(expression)
    if value is None:
        raise ValueError(f"Required environment variable {expression} not set")
    return value


def substitute_env_vars(text: str) -> str:
    """Replace placeholders in *text* with environment values.

    Supported forms:

    - ``${NAME}``: required, :class:`ValueError` when unset
    - ``${NAME:-default}``: falls back to ``default``
    - ``${NAME:?message}``: required, with ``message`` in the error
    """
    return _PLACEHOLDER.sub(lambda match: _resolve(match.group(1)), text)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_NAME`` variables to ``NAME`` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    promoted = [name for name in os.environ if name.startswith(prefix)]
    if promoted:
        logger.info("Applying {} overrides: {}", env_mode, promoted)

    for name in promoted:
        os.environ[name[len(prefix):]] = os.environ[name]


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read *file_path*, substitute placeholders and validate the ``config`` key.

    Raises:
        ValueError: A required variable is missing, the YAML is malformed or
            empty, or the values fail validation.
        FileNotFoundError: *file_path* does not exist.
    """
    content = Path(file_path).read_text()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    apply_environment_overrides(env_mode)

    try:
        loaded = yaml.safe_load(substitute_env_vars(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError(f"Configuration file is empty: {file_path}")

    try:
        config = ConfigData(**(loaded.get("config") or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if config.app.environment == "production" and config.database.is_sqlite:
        logger.warning(
            "SQLite is not recommended for production use. "
            "Consider PostgreSQL for better performance and reliability."
        )

    return config
