"""
Network logging middleware for Starlette and FastAPI applications.

Hooks the two-phase network log pipeline into the request lifecycle:
the pre phase runs before downstream handlers are called, the post phase
runs once the response body has been sent, and the finished record is
handed to the logging core. When a downstream handler raises, the post
phase runs against a bare 500 response before the exception propagates.

Usage:
    app = FastAPI()
    app.add_middleware(NetworkLoggingMiddleware)
"""

from typing import Any, Callable, List, Optional

from fastapi import Request, Response
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from netlog.config.settings import NetlogSettings, get_settings
from netlog.core.pipeline import NetworkLogPipeline
from netlog.infrastructure.logging.config import get_logger
from netlog.infrastructure.logging.core import StructlogLoggingCore
from netlog.models.fields import FieldConfig
from netlog.models.interfaces import ILoggingCore


logger = get_logger(__name__)

SERVER_ERROR_STATUS = 500


class ResponseHandle:
    """
    Stand-in for the response while downstream handlers are still running.

    Field reads are delegated to the real response once it is bound;
    before that every field and header reads as absent. Completion
    listeners run after the response body has been sent.
    """

    def __init__(self):
        self.response: Optional[Response] = None
        self._listeners: List[Callable[[], Any]] = []

    def __getattr__(self, name: str) -> Any:
        response = self.__dict__.get("response")
        if response is None:
            raise AttributeError(name)
        return getattr(response, name)

    def header(self, name: str) -> Optional[str]:
        """
        Response header value, ``None`` when missing.

        Before ``bind`` there are no headers yet, so every name reads as
        missing (``None``), the same result ContextAdapter gives for a
        missing header. ``""`` is reserved for hosts without header access.
        """
        if self.response is None:
            return None
        return self.response.headers.get(name)

    def on_completion(self, listener: Callable[[], Any]) -> None:
        self._listeners.append(listener)

    def bind(self, response: Response) -> Response:
        """Attach the real response and schedule completion after it is sent."""
        self.response = response
        if self._listeners:
            response.background = BackgroundTask(self._after_response, response.background)
        return response

    def fire_completion(self) -> None:
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener()

    async def _after_response(self, background: Optional[BackgroundTask]) -> None:
        self.fire_completion()
        if background is not None:
            await background()


class NetworkLoggingMiddleware(BaseHTTPMiddleware):
    """
    Emits one structured network record per request.

    Args:
        app: Downstream ASGI application
        core: Logging core, a StructlogLoggingCore when omitted
        config: Field configuration, the core's configuration when omitted
        settings: Settings, the global instance when omitted
    """

    def __init__(
        self,
        app: ASGIApp,
        core: Optional[ILoggingCore] = None,
        config: Optional[FieldConfig] = None,
        settings: Optional[NetlogSettings] = None
    ):
        super().__init__(app)
        self.settings = settings or get_settings()
        self.core = core or StructlogLoggingCore(config=config, settings=self.settings)
        self.pipeline = NetworkLogPipeline(self.core, config=config, level=self.settings.network.level)
        self.enabled = self.settings.network.enabled
        logger.info(
            "NetworkLoggingMiddleware initialized",
            enabled=self.enabled,
            pre_fields=len(self.pipeline.config.pre),
            post_fields=len(self.pipeline.config.post)
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled:
            return await call_next(request)

        handle = ResponseHandle()
        try:
            self.pipeline.start(request, handle)
        except Exception as e:
            logger.error(
                "network_log_start_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                exc_info=True
            )

        try:
            response = await call_next(request)
        except Exception as e:
            # The server error handler answers with a 500; record that outcome
            handle.bind(Response(status_code=SERVER_ERROR_STATUS))
            handle.fire_completion()
            logger.error(
                "request_failed_with_exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise

        return handle.bind(response)
