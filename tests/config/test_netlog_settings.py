"""
Test module for netlog.config.settings
"""

import pytest

from netlog.config.settings import LogFormat, LogLevel, NetlogSettings, get_settings, reset_settings
from netlog.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("NETLOG_LOG_LEVEL", "NETLOG_LOG_FORMAT", "NETLOG_LOG_PATTERN",
                 "NETLOG_NETWORK_ENABLED", "NETLOG_NETWORK_LEVEL", "NETLOG_NETWORK_FIELD_CONFIG_PATH",
                 "NETLOG_NETWORK_COMPONENT_NAME", "NETLOG_NETWORK_LAYER"):
        monkeypatch.delenv(name, raising=False)


class TestNetlogSettings:

    def test_defaults(self):
        settings = NetlogSettings()

        assert settings.logging.level is LogLevel.INFO
        assert settings.logging.format is LogFormat.JSON
        assert settings.logging.pattern is None
        assert settings.network.enabled is True
        assert settings.network.level == "info"
        assert settings.network.field_config_path is None
        assert settings.network.component_name == "netlog"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("NETLOG_LOG_LEVEL", "debug")
        monkeypatch.setenv("NETLOG_LOG_FORMAT", "console")
        monkeypatch.setenv("NETLOG_LOG_PATTERN", "{{level}} {{event}}")
        monkeypatch.setenv("NETLOG_NETWORK_ENABLED", "false")
        monkeypatch.setenv("NETLOG_NETWORK_COMPONENT_NAME", "orders-api")

        settings = NetlogSettings()

        assert settings.logging.level is LogLevel.DEBUG
        assert settings.logging.format is LogFormat.CONSOLE
        assert settings.logging.pattern == "{{level}} {{event}}"
        assert settings.network.enabled is False
        assert settings.network.component_name == "orders-api"


class TestGetSettings:

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_reset_creates_new_instance(self):
        first = get_settings()
        reset_settings()

        assert get_settings() is not first

    def test_invalid_value_raises_configuration_error(self, monkeypatch):
        monkeypatch.setenv("NETLOG_LOG_LEVEL", "loud")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert exc_info.value.error_code == "SETTINGS_INIT_ERROR"
