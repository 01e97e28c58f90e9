"""
Default logging core.

Owns the field configuration, correlation contexts, static field
overrides and the transport of finished network records through
structlog.
"""

from typing import Any, Dict, List, Optional

from netlog.config.fields import default_field_config, load_field_config
from netlog.config.settings import NetlogSettings, get_settings
from netlog.core.context import ContextAdapter
from netlog.exceptions import ConfigurationError
from netlog.infrastructure.logging.config import configure_logging, get_logger
from netlog.infrastructure.logging.coordinator import LoggingCoordinator, RequestContext
from netlog.models.fields import FieldConfig, FieldDescriptor
from netlog.models.interfaces import ILoggingCore


NETWORK_LOGGER_NAME = "netlog.network"
NETWORK_EVENT = "network_activity"

_LEVELS = ("debug", "info", "warning", "error", "critical")
_LEVEL_ALIASES = {"warn": "warning", "verbose": "debug", "silly": "debug", "fatal": "critical"}


def normalize_level(level: Any) -> str:
    """
    Canonical lower-case level name.

    Raises:
        ConfigurationError: If the level is unknown
    """
    name = str(getattr(level, "value", level)).strip().lower()
    name = _LEVEL_ALIASES.get(name, name)
    if name not in _LEVELS:
        raise ConfigurationError(
            f"Unknown logging level '{level}'",
            error_code="INVALID_LOG_LEVEL",
            context={"level": str(level), "valid_levels": list(_LEVELS)}
        )
    return name


def _level_or_info(level: Any) -> str:
    try:
        return normalize_level(level)
    except ConfigurationError:
        return "info"


class StructlogLoggingCore(ILoggingCore):
    """
    Logging core writing network records and messages through structlog.

    Args:
        config: Field configuration, otherwise loaded from
            ``settings.network.field_config_path`` or the built-in field set
        settings: Settings, the global instance when omitted
    """

    def __init__(self, config: Optional[FieldConfig] = None, settings: Optional[NetlogSettings] = None):
        self.settings = settings or get_settings()
        logging_settings = self.settings.logging
        self.logging_config = configure_logging(
            level=normalize_level(logging_settings.level),
            log_format=str(getattr(logging_settings.format, "value", logging_settings.format)),
            log_pattern=logging_settings.pattern
        )

        if config is None:
            network_settings = self.settings.network
            if network_settings.field_config_path:
                config = load_field_config(network_settings.field_config_path)
            else:
                config = default_field_config(
                    component_name=network_settings.component_name,
                    layer=network_settings.layer
                )
        self.field_config = config

        self.coordinator = LoggingCoordinator()
        self._overrides: Dict[str, Any] = {}
        self._network_logger = get_logger(NETWORK_LOGGER_NAME)

    def init_log(self) -> Dict[str, Any]:
        return {}

    def get_pre_log_config(self) -> List[FieldDescriptor]:
        return list(self.field_config.pre)

    def get_post_log_config(self) -> List[FieldDescriptor]:
        return list(self.field_config.post)

    def bind_log_functions(self, request: Any) -> None:
        """
        Start the request context and expose it on the request.

        The correlation ID is taken from the record, then from the
        ``x-correlation-id`` header, and generated when neither has one.
        Afterwards the request carries ``correlation_id``, ``log_context``
        and a bound ``logger``.
        """
        context = ContextAdapter(request)
        record = context.read_stored("log_record") or {}
        correlation_id = record.get("correlation_id") or context.read_header("x-correlation-id")

        request_ctx = self.coordinator.start_request(correlation_id=correlation_id)
        context.write_field("correlation_id", request_ctx.correlation_id)
        context.write_field("log_context", request_ctx)
        context.write_field("logger", request_ctx.logger)

    def write_static_fields(self, record: Dict[str, Any]) -> None:
        for name, value in self._overrides.items():
            record[name] = value

    def send_log(self, level: str, record: Dict[str, Any]) -> None:
        log_method = getattr(self._network_logger, _level_or_info(level))
        log_method(**{"event": NETWORK_EVENT, **record})

    def set_logging_level(self, level: str) -> None:
        self.logging_config.set_level(normalize_level(level))

    def set_log_pattern(self, pattern: Optional[str]) -> None:
        self.logging_config.set_log_pattern(pattern)

    def override_field(self, name: str, value: Any) -> bool:
        """
        Force ``name`` to ``value`` in every record emitted from now on.

        ``None`` removes the override. The mapping is replaced, never
        mutated, so a record being emitted sees a consistent set.

        Returns:
            True when an override for ``name`` is active afterwards
        """
        overrides = dict(self._overrides)
        if value is None:
            overrides.pop(name, None)
        else:
            overrides[name] = value
        self._overrides = overrides
        return name in overrides

    def get_correlation_object(self) -> RequestContext:
        return self.coordinator.get_context() or self.coordinator.detached_context()

    def log_message(self, level: str, message: str, **fields: Any) -> None:
        self.get_correlation_object().log_message(_level_or_info(level), message, **fields)
