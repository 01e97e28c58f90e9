"""
netlog Logging Infrastructure

Components:
- config: structlog configuration with JSON, console or pattern rendering
- coordinator: Request-scoped context and correlation IDs
- core: Default logging core receiving finished network records
"""

from .coordinator import LoggingCoordinator, RequestContext, request_context
from .config import NetlogLogger, configure_logging, get_logger, get_logging_config

__all__ = [
    'LoggingCoordinator',
    'RequestContext',
    'request_context',
    'NetlogLogger',
    'configure_logging',
    'get_logger',
    'get_logging_config',
]
