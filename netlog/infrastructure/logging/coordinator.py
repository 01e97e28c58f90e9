"""
netlog Logging Coordinator

Provides the request-scoped logging context: the correlation ID of the
request currently being served and helpers that log messages carrying it.
"""

from contextvars import ContextVar
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid

import structlog


MESSAGE_LOGGER_NAME = "netlog.message"


@dataclass
class RequestContext:
    """
    Request-scoped context handed out as the correlation object.

    Attributes:
        correlation_id: Identifier shared by the network record and every
            message logged while serving the request
        start_time: Moment the context was created
        attributes: Additional request-scoped metadata
        detached: True when created outside of any request
    """
    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    attributes: Dict[str, Any] = field(default_factory=dict)
    detached: bool = False

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Message logger bound to this context's correlation ID."""
        return structlog.get_logger(MESSAGE_LOGGER_NAME).bind(
            correlation_id=self.correlation_id,
            **self.attributes
        )

    def log_message(self, level: str, message: str, **fields: Any) -> None:
        """
        Log a message carrying this context's correlation ID.

        Args:
            level: Log level (debug, info, warning, error, critical)
            message: Log message
            **fields: Custom fields to include in the event
        """
        log_method = getattr(self.logger, level.lower(), None)
        if not callable(log_method):
            log_method = self.logger.info
        log_method(message, **fields)

    def __enter__(self):
        """Enter the context manager - set this context as active."""
        self._token = request_context.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit the context manager - restore the previous context."""
        request_context.reset(self._token)
        return False


# Context variable for the request being served; each request task owns its copy
request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    'request_context',
    default=None
)


class LoggingCoordinator:
    """
    Creates and looks up request contexts.

    ``start_request`` is called once per request when the logging helpers
    are bound; everything logged afterwards in the same task picks up the
    correlation ID through the ``add_request_context`` processor.
    """

    def start_request(self, correlation_id: Optional[str] = None, **attributes) -> RequestContext:
        """
        Initialize the request context - called ONCE per request.

        Args:
            correlation_id: Identifier to reuse, a new UUID when omitted
            **attributes: Additional request-scoped metadata

        Returns:
            RequestContext: The active request context
        """
        context = RequestContext(attributes=dict(attributes))
        if correlation_id:
            context.correlation_id = str(correlation_id)
        request_context.set(context)
        return context

    @staticmethod
    def get_context() -> Optional[RequestContext]:
        """
        Get current request context.

        Returns:
            Current RequestContext if available, None otherwise
        """
        return request_context.get()

    @staticmethod
    def detached_context() -> RequestContext:
        """Context for code running outside of a request, with a fresh correlation ID."""
        return RequestContext(detached=True)
