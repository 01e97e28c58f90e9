"""
Network activity logging entry points.

``NetworkLogging`` bundles a logging core and a pipeline behind the calls
an application uses: request hooking, configuration and message logging.
A process-wide default instance backs the module-level functions:

    from netlog import network

    network.set_logging_level("debug")
    network.install(app)          # Starlette / FastAPI
    network.log_network(req, res, next_handler)   # callback-style hosts
"""

from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from netlog.core.pipeline import NetworkLogPipeline
from netlog.infrastructure.logging.core import StructlogLoggingCore
from netlog.models.fields import FieldConfig
from netlog.models.interfaces import ILoggingCore


class NetworkLogging:
    """
    Network logging facade.

    The core and the pipeline are created on first use. Replacing the core
    or the field configuration builds a new pipeline for later requests;
    requests already in flight finish with the pipeline they started with.
    """

    def __init__(self, core: Optional[ILoggingCore] = None, config: Optional[FieldConfig] = None):
        self._core = core
        self._config = config
        self._pipeline: Optional[NetworkLogPipeline] = None

    @property
    def core(self) -> ILoggingCore:
        if self._core is None:
            self._core = StructlogLoggingCore(config=self._config)
        return self._core

    @property
    def pipeline(self) -> NetworkLogPipeline:
        if self._pipeline is None:
            self._pipeline = NetworkLogPipeline(self.core, config=self._config)
        return self._pipeline

    def set_core_logger(self, core: ILoggingCore) -> None:
        self._core = core
        self._pipeline = None

    def set_config(self, config: Union[FieldConfig, Mapping]) -> None:
        """Use ``config`` (a FieldConfig or its dictionary form) for new requests."""
        if not isinstance(config, FieldConfig):
            config = FieldConfig.model_validate(config)
        self._config = config
        self._pipeline = None

    def log_network(self, request: Any, response: Any, call_next: Callable[[], Any]) -> Any:
        """Hook one request of a callback-style host; always calls ``call_next``."""
        return self.pipeline.handle(request, response, call_next)

    def install(self, app: Any) -> None:
        """Register the network logging middleware on a Starlette or FastAPI app."""
        from netlog.api.middleware.logging import NetworkLoggingMiddleware

        app.add_middleware(NetworkLoggingMiddleware, core=self.core, config=self._config)

    def set_logging_level(self, level: str) -> None:
        self.core.set_logging_level(level)

    def set_log_pattern(self, pattern: Optional[str]) -> None:
        self.core.set_log_pattern(pattern)

    def override_field(self, name: str, value: Any) -> bool:
        return self.core.override_field(name, value)

    def get_correlation_object(self) -> Any:
        return self.core.get_correlation_object()

    def log_message(self, level: str, message: str, **fields: Any) -> None:
        self.core.log_message(level, message, **fields)


_default = NetworkLogging()

set_core_logger = _default.set_core_logger
set_config = _default.set_config
log_network = _default.log_network
install = _default.install
set_logging_level = _default.set_logging_level
set_log_pattern = _default.set_log_pattern
override_field = _default.override_field
get_correlation_object = _default.get_correlation_object
log_message = _default.log_message
