"""Tests for settings loading and logging setup."""

from __future__ import annotations

import logging
import logging.handlers

import pytest
import yaml

from projnav.shared.core import configuration
from projnav.shared.core.configuration import (
    ConfigManager,
    LoggingConfig,
    SystemConfig,
    ValidationLevel,
    get_config_manager,
)
from projnav.shared.core.errors import ConfigurationError
from projnav.shared.core.logging_config import configure_logging

ENV_KEYS = ("LOG_LEVEL", "LOG_CONSOLE_LEVEL", "LOG_FILE", "ANALYTICS_ENABLED", "ANALYTICS_SINK",
            "TRANSITION_TRACE_PHASES")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def write_yaml(path, data) -> None:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


class TestConfigManager:
    """Tests for the env → project → user → defaults precedence."""

    def test_empty_dir_gives_model_defaults(self, tmp_path) -> None:
        config = ConfigManager(tmp_path).get_config()

        assert config == SystemConfig()
        assert config.analytics.sink == "logging"
        assert config.transition.trace_phases is False

    def test_shipped_defaults_are_valid(self) -> None:
        config = ConfigManager().get_config()

        assert config.logging.level == "INFO"
        assert config.analytics.enabled is True

    def test_precedence(self, tmp_path, monkeypatch) -> None:
        write_yaml(tmp_path / "defaults.yaml", {"logging": {"level": "ERROR"}, "analytics": {"sink": "null"}})
        write_yaml(tmp_path / "user.yaml", {"logging": {"level": "WARNING"}, "analytics": {"sink": "recording"}})
        write_yaml(tmp_path / "project.yaml", {"logging": {"level": "debug"}})
        monkeypatch.setenv("ANALYTICS_SINK", "event_bus")
        monkeypatch.setenv("TRANSITION_TRACE_PHASES", "yes")

        config = ConfigManager(tmp_path).get_config()

        assert config.logging.level == "DEBUG"
        assert config.analytics.sink == "event_bus"
        assert config.transition.trace_phases is True

    def test_strict_validation_raises(self, tmp_path) -> None:
        write_yaml(tmp_path / "project.yaml", {"analytics": {"sink": "carrier-pigeon"}})

        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path).get_config()

    def test_lenient_validation_falls_back(self, tmp_path) -> None:
        write_yaml(tmp_path / "project.yaml", {"logging": {"level": "LOUD"}})

        config = ConfigManager(tmp_path).get_config(ValidationLevel.LENIENT)

        assert config == SystemConfig()

    def test_malformed_yaml_is_ignored(self, tmp_path) -> None:
        (tmp_path / "user.yaml").write_text("logging: [unclosed", encoding="utf-8")

        assert ConfigManager(tmp_path).get_config() == SystemConfig()

    def test_save_project_config_merges_and_reloads(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path / "settings")
        assert manager.get_config().analytics.enabled is True

        assert manager.save_project_config({"analytics": {"enabled": False}})
        assert manager.save_project_config({"transition": {"trace_phases": True}})

        config = manager.get_config()
        assert config.analytics.enabled is False
        assert config.transition.trace_phases is True

    def test_reload_config_picks_up_file_changes(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path)
        assert manager.get_config().logging.console_level == "WARNING"

        write_yaml(tmp_path / "user.yaml", {"logging": {"console_level": "error"}})
        manager.reload_config()

        assert manager.get_config().logging.console_level == "ERROR"

    def test_global_manager_is_replaced_when_dir_given(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setattr(configuration, "_config_manager", None)

        first = get_config_manager(tmp_path)
        assert get_config_manager() is first
        assert get_config_manager(tmp_path) is not first


class TestConfigureLogging:
    """Tests for root logger setup."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_only(self) -> None:
        root = configure_logging(LoggingConfig(level="debug", console_level="error"))

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.ERROR

    def test_file_handler_when_file_set(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "navigator.log"
        root = configure_logging(LoggingConfig(file=str(log_file), max_bytes=2048, backup_count=2))

        file_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 2048
        assert log_file.parent.is_dir()
