"""
Unified Configuration System for netlog

Single source of truth for runtime configuration using pydantic-settings.
Every value can be set through ``NETLOG_``-prefixed environment variables
or a ``.env`` file.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class LoggingSettings(BaseSettings):
    """Logging output configuration"""
    level: LogLevel = Field(default=LogLevel.INFO)
    format: LogFormat = Field(default=LogFormat.JSON)
    # {{field}} template, JSON output when unset
    pattern: Optional[str] = Field(default=None)

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    model_config = {"env_prefix": "NETLOG_LOG_", "extra": "ignore"}


class NetworkLogSettings(BaseSettings):
    """Network activity record configuration"""
    enabled: bool = Field(default=True)
    level: str = Field(default="info")

    # JSON document {"pre": [...], "post": [...]}; built-in field set when unset
    field_config_path: Optional[str] = Field(default=None)

    component_name: str = Field(default="netlog")
    layer: str = Field(default="[PY] NET")

    model_config = {"env_prefix": "NETLOG_NETWORK_", "extra": "ignore"}


class NetlogSettings(BaseSettings):
    """
    Unified configuration for netlog.

    All configuration access should go through this class.
    """
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    network: NetworkLogSettings = Field(default_factory=NetworkLogSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }


_settings_instance: Optional[NetlogSettings] = None


def get_settings() -> NetlogSettings:
    """
    Get global settings instance (singleton pattern).

    Raises:
        ConfigurationError: If settings validation fails
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            from dotenv import load_dotenv

            load_dotenv(override=False)
            _settings_instance = NetlogSettings()
        except Exception as e:
            from netlog.exceptions import ConfigurationError
            raise ConfigurationError(
                f"Settings initialization failed: {e}",
                error_code="SETTINGS_INIT_ERROR",
                context={"original_error": str(e), "error_type": type(e).__name__}
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """
    Reset settings instance (primarily for testing).

    Forces recreation of settings on next get_settings() call.
    """
    global _settings_instance
    _settings_instance = None
