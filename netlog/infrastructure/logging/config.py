"""
netlog Logging Configuration

Provides structlog configuration with JSON formatting, request context
injection, OpenTelemetry trace context and optional log-pattern rendering.
"""

import logging
import re
from typing import Dict, Any, Optional
import structlog
from opentelemetry import trace


LOGGER_NAMESPACE = "netlog"

_PATTERN_PLACEHOLDER = re.compile(r"\{\{\s*([\w.-]+)\s*\}\}")


class NetlogLogger:
    """
    Logger configuration shared by every netlog component.

    This class configures structlog with processors for request context
    injection, trace context and final rendering. Rendering is JSON by
    default, a human readable console layout when ``log_format`` is
    ``"console"``, or a ``{{field}}`` template once a log pattern is set.
    """

    def __init__(self, level: str = "INFO", log_format: str = "json", log_pattern: Optional[str] = None):
        """Initialize the logger configuration."""
        self.level = level.upper()
        self.log_format = log_format
        self.log_pattern = log_pattern
        self._json_renderer = structlog.processors.JSONRenderer()
        self._console_renderer = structlog.dev.ConsoleRenderer(colors=False)
        self.configure_structlog()

    def configure_structlog(self) -> None:
        """
        Configure structlog with the netlog processor chain.

        Sets up a processor chain that handles:
        - Log level filtering
        - Logger name and level addition
        - Timestamp formatting
        - Exception information
        - Request context injection
        - OpenTelemetry trace context
        - JSON, console or pattern output
        """
        # Configure standard library logging to use structlog formatting
        logging.basicConfig(
            format="%(message)s",
            level=logging.INFO,
        )
        logging.getLogger(LOGGER_NAMESPACE).setLevel(self.level)

        structlog.configure(
            processors=[
                # Standard processors
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),

                # Custom processors
                self.add_request_context,
                self.add_trace_context,

                # Final rendering
                self.render
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def set_level(self, level: str) -> None:
        """Change the threshold of every logger under the netlog namespace."""
        self.level = level.upper()
        logging.getLogger(LOGGER_NAMESPACE).setLevel(self.level)

    def set_log_pattern(self, pattern: Optional[str]) -> None:
        """Render events through ``pattern``, or back to the default format for ``None``."""
        self.log_pattern = pattern or None

    def render(self, logger, method_name: str, event_dict: Dict[str, Any]) -> str:
        """Final processor: pattern, console or JSON output."""
        if self.log_pattern:
            return self.apply_pattern(self.log_pattern, event_dict)
        if self.log_format == "console":
            return self._console_renderer(logger, method_name, event_dict)
        return self._json_renderer(logger, method_name, event_dict)

    @staticmethod
    def apply_pattern(pattern: str, event_dict: Dict[str, Any]) -> str:
        """
        Substitute ``{{field}}`` placeholders with event values.

        Fields missing from the event render as ``-``.

        Args:
            pattern: Template such as ``"{{timestamp}} {{level}} {{event}}"``
            event_dict: Event dictionary to render

        Returns:
            The rendered line
        """
        def substitute(match: "re.Match[str]") -> str:
            value = event_dict.get(match.group(1))
            return "-" if value is None else str(value)

        return _PATTERN_PLACEHOLDER.sub(substitute, pattern)

    @staticmethod
    def add_request_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add the active correlation ID without overwriting an explicit one.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with request context
        """
        # Import here to avoid circular imports
        from netlog.infrastructure.logging.coordinator import request_context

        ctx = request_context.get()
        if ctx and 'correlation_id' not in event_dict:
            event_dict['correlation_id'] = ctx.correlation_id

        return event_dict

    @staticmethod
    def add_trace_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add OpenTelemetry trace context to log entries.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with trace context
        """
        span = trace.get_current_span()
        if span and span.is_recording():
            span_context = span.get_span_context()
            if 'trace_id' not in event_dict:
                event_dict['trace_id'] = format(span_context.trace_id, '032x')
            if 'span_id' not in event_dict:
                event_dict['span_id'] = format(span_context.span_id, '016x')

        return event_dict


# Singleton configuration instance
_logger_config: Optional[NetlogLogger] = None


def configure_logging(level: str = "INFO", log_format: str = "json", log_pattern: Optional[str] = None) -> NetlogLogger:
    """
    (Re)build the shared logging configuration.

    Args:
        level: Threshold for the netlog namespace
        log_format: ``"json"`` or ``"console"``
        log_pattern: Optional ``{{field}}`` template

    Returns:
        The active NetlogLogger configuration
    """
    global _logger_config
    if _logger_config is None:
        _logger_config = NetlogLogger(level=level, log_format=log_format, log_pattern=log_pattern)
        return _logger_config

    # Update in place so loggers cached on first use keep rendering through it
    _logger_config.level = level.upper()
    _logger_config.log_format = log_format
    _logger_config.log_pattern = log_pattern
    _logger_config.configure_structlog()
    return _logger_config


def get_logging_config() -> NetlogLogger:
    """Return the active configuration, creating the default one on first use."""
    global _logger_config
    if _logger_config is None:
        _logger_config = NetlogLogger()
    return _logger_config


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Does not touch the structlog configuration: loggers render through
    whatever the host application configured until a logging core calls
    ``configure_logging``.

    Args:
        name: Logger name, typically module name

    Returns:
        Lazily bound structlog logger

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("falling_back_for_field", field="status", phase="pre")
    """
    return structlog.get_logger(name)
