"""Unit tests for configuration loading and the application context."""

from pathlib import Path

import pytest

from src.user_service.runtime.config.config_data import (
    ConfigData,
    DatabaseConfig,
    EventsConfig,
)
from src.user_service.runtime.config.config_template import (
    load_templated_yaml,
    substitute_env_vars,
)
from src.user_service.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    with_context,
)

_SHIPPED_CONFIG = Path(__file__).resolve().parents[3] / "config.yaml"

_YAML = """
config:
  app:
    environment: ${APP_ENVIRONMENT:-test}
    port: ${APP_PORT:-9000}
  database:
    url: ${DATABASE_URL:-sqlite://}
  events:
    max_workers: 3
  logging:
    file: null
"""


class TestSubstituteEnvVars:
    def test_default_used_when_unset(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("SOME_VAR", raising=False)
        assert substitute_env_vars("x=${SOME_VAR:-fallback}") == "x=fallback"

    def test_environment_wins_over_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SOME_VAR", "real")
        assert substitute_env_vars("x=${SOME_VAR:-fallback}") == "x=real"

    def test_required_variable_missing(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("SOME_VAR", raising=False)
        with pytest.raises(ValueError, match="SOME_VAR"):
            substitute_env_vars("${SOME_VAR}")

    def test_required_variable_custom_message(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("SOME_VAR", raising=False)
        with pytest.raises(ValueError, match="set me"):
            substitute_env_vars("${SOME_VAR:?set me}")


class TestLoadTemplatedYaml:
    def test_loads_config_section(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("APP_PORT", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        path = tmp_path / "config.yaml"
        path.write_text(_YAML)

        config = load_templated_yaml(path)

        assert config.app.environment == "test"
        assert config.app.port == 9000
        assert config.database.is_memory
        assert config.events.max_workers == 3
        assert config.logging.file is None
        # Untouched sections keep their defaults
        assert config.notifications.email.is_configured is False

    def test_environment_prefixed_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        monkeypatch.setenv("TEST_APP_PORT", "7777")
        monkeypatch.delenv("APP_PORT", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(_YAML)

        try:
            config = load_templated_yaml(path)
        finally:
            monkeypatch.delenv("APP_PORT", raising=False)

        assert config.app.port == 7777

    def test_shipped_config_loads_with_defaults(self, monkeypatch: pytest.MonkeyPatch):
        for name in ("VAR", "NAME", "DATABASE_URL", "APP_PORT", "EMAIL_API_URL"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("APP_ENVIRONMENT", "development")

        config = load_templated_yaml(_SHIPPED_CONFIG)

        assert config.app.api_prefix == "/api"
        assert config.app.port == 8000
        assert config.database.url == "sqlite:///./users.db"
        assert config.notifications.email.api_url is None

    def test_invalid_values_rejected(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  events:\n    max_workers: 0\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_empty_file_rejected(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ValueError):
            load_templated_yaml(path)


class TestDatabaseConfig:
    @pytest.mark.parametrize(
        ("url", "is_sqlite", "is_memory"),
        [
            ("sqlite://", True, True),
            ("sqlite:///:memory:", True, True),
            ("sqlite:///./users.db", True, False),
            ("postgresql://u:p@db/users", False, False),
        ],
    )
    def test_url_classification(self, url: str, is_sqlite: bool, is_memory: bool):
        config = DatabaseConfig(url=url)
        assert config.is_sqlite is is_sqlite
        assert config.is_memory is is_memory


class TestAppContext:
    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert isinstance(get_config(), ConfigData)
        assert context.config is get_config()

    def test_with_context_merges_partial_override(self):
        original = get_config()

        with with_context(ConfigData(events=EventsConfig(max_workers=1))):
            overridden = get_config()
            assert overridden.events.max_workers == 1
            assert overridden.database.url == original.database.url
            assert overridden.app.environment == original.app.environment

        assert get_config() is original

    def test_nested_overrides(self):
        with with_context(ConfigData(events=EventsConfig(max_workers=1))):
            with with_context(ConfigData(database=DatabaseConfig(url="sqlite://"))):
                config = get_config()
                assert config.events.max_workers == 1
                assert config.database.url == "sqlite://"
            assert get_config().events.max_workers == 1

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError):
            with with_context({"events": {"max_workers": 1}}):
                pass

    def test_set_config_replaces_current(self):
        original = get_config()
        replacement = ConfigData(events=EventsConfig(max_workers=9))

        set_config(replacement)
        try:
            assert get_config() is replacement
        finally:
            set_config(original)

        assert get_config() is original
