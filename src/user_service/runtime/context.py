"""Application context holding the active configuration.

The configuration is loaded once from ``config.yaml`` (or the file named by
``APP_CONFIG_FILE``) and kept in a context variable so that tests and CLI
commands can swap it for a block of code without touching global state.
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel

from src.user_service.runtime.config.config_data import ConfigData
from src.user_service.runtime.config.config_template import load_templated_yaml


@dataclass
class AppContext:
    """Process-wide state visible to the current execution context."""

    config: ConfigData


def load_default_config() -> ConfigData:
    """Load config.yaml (or ``APP_CONFIG_FILE``), falling back to model defaults."""
    config_path = Path(os.getenv("APP_CONFIG_FILE", "config.yaml"))
    if not config_path.exists():
        logger.warning("{} not found; using default configuration", config_path)
        return ConfigData()
    return load_templated_yaml(config_path)


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=load_default_config())
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def get_config() -> ConfigData:
    """Return the configuration of the current context."""
    return get_context().config


def set_config(config: ConfigData) -> None:
    """Replace the current configuration outright, with no merging."""
    set_context(replace(get_context(), config=config))


def _explicit_fields(model: BaseModel) -> dict[str, Any]:
    """Collect the fields a caller actually set, descending into sections.

    A section counts as set when any of its own leaves was set, so
    ``ConfigData(events=EventsConfig(max_workers=1))`` yields
    ``{"events": {"max_workers": 1}}`` and nothing else.
    """
    explicit: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            nested = _explicit_fields(value)
            if nested:
                explicit[name] = nested
            elif name in model.model_fields_set:
                explicit[name] = value.model_dump()
        elif name in model.model_fields_set:
            explicit[name] = value
    return explicit


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[None]:
    """Run a block with *config_override* layered over the current config.

    Only explicitly set fields override; every other value is inherited from
    the enclosing context, so overrides nest.

    Example:
        with with_context(ConfigData(events=EventsConfig(max_workers=1))):
            get_config().events.max_workers  # 1, other sections unchanged
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    current = get_context()
    merged = ConfigData.model_validate(
        _deep_merge(current.config.model_dump(), _explicit_fields(config_override))
    )
    token = set_context(replace(current, config=merged))
    try:
        yield
    finally:
        _app_context.reset(token)
