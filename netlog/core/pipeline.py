"""
Two-phase network log pipeline.

Every request walks the states

    CREATED -> PRE_RESOLVED -> AWAITING_COMPLETION -> POST_RESOLVED -> EMITTED

The pre pass runs when the request arrives, the post pass when the
response reports completion, both writing into the same record. The
finished record is handed to the logging core exactly once.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from netlog.core.context import ContextAdapter
from netlog.core.resolution import ResolutionPass
from netlog.core.resolver import Phase
from netlog.infrastructure.logging.config import get_logger
from netlog.models.fields import FieldConfig, LogRecord
from netlog.models.interfaces import ILoggingCore


logger = get_logger(__name__)

NETWORK_LOG_LEVEL = "info"

# Request field under which downstream handlers find the record
RECORD_FIELD = "log_record"


class PipelineState(str, Enum):
    CREATED = "created"
    PRE_RESOLVED = "pre_resolved"
    AWAITING_COMPLETION = "awaiting_completion"
    POST_RESOLVED = "post_resolved"
    EMITTED = "emitted"


def _as_context(host: Any) -> ContextAdapter:
    return host if isinstance(host, ContextAdapter) else ContextAdapter(host)


class RequestLifecycle:
    """
    One request's record and its position in the state machine.

    ``complete`` is the completion listener. It runs the post pass and
    emits the record; further invocations are ignored.
    """

    def __init__(self, pipeline: "NetworkLogPipeline", request: ContextAdapter,
                 response: ContextAdapter, record: LogRecord):
        self.pipeline = pipeline
        self.request = request
        self.response = response
        self._record = record
        self.state = PipelineState.CREATED

    @property
    def record(self) -> Mapping[str, Any]:
        """The live record, or a read-only view once emitted."""
        if self.state is PipelineState.EMITTED:
            return MappingProxyType(self._record)
        return self._record

    def resolve_pre(self) -> None:
        self.pipeline.pre_pass.run(self.request, self.response, self._record)
        self.state = PipelineState.PRE_RESOLVED

    def await_completion(self) -> bool:
        """Register ``complete`` on the response's completion event."""
        registered = self.response.on_completion(self.complete)
        self.state = PipelineState.AWAITING_COMPLETION
        return registered

    def complete(self, *event_args: Any) -> None:
        if self.state is not PipelineState.AWAITING_COMPLETION:
            logger.warning("completion_ignored", state=self.state.value)
            return

        try:
            self.pipeline.post_pass.run(self.request, self.response, self._record)
            self.state = PipelineState.POST_RESOLVED
            self.pipeline.emit(self._record)
        except Exception as e:
            logger.error(
                "network_log_emission_failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )
        finally:
            self.state = PipelineState.EMITTED
            self.request.write_field(RECORD_FIELD, MappingProxyType(self._record))


class NetworkLogPipeline:
    """
    Resolves and emits one structured record per request.

    Args:
        core: Logging core receiving the finished records
        config: Descriptor lists; fetched once from ``core`` when omitted
        level: Severity the records are sent with
    """

    def __init__(self, core: ILoggingCore, config: Optional[FieldConfig] = None,
                 level: str = NETWORK_LOG_LEVEL):
        self.core = core
        if config is None:
            config = FieldConfig(pre=core.get_pre_log_config(), post=core.get_post_log_config())
        self.config = config
        self.level = level
        self.pre_pass = ResolutionPass(config.pre, Phase.PRE)
        self.post_pass = ResolutionPass(config.post, Phase.POST)

    def start(self, request: Any, response: Any) -> RequestLifecycle:
        """
        Run the request-arrival half of the lifecycle.

        Normalizes both host objects, resolves the pre phase, stores the
        record on the request, lets the core bind its helpers and registers
        the completion listener. Resolution problems are logged, not raised.

        Args:
            request: Host request object or ContextAdapter
            response: Host response object or ContextAdapter

        Returns:
            The lifecycle, in state AWAITING_COMPLETION
        """
        request_context = _as_context(request)
        response_context = _as_context(response)
        lifecycle = RequestLifecycle(self, request_context, response_context, self.core.init_log())

        try:
            lifecycle.resolve_pre()
            request_context.write_field(RECORD_FIELD, lifecycle.record)
            self.core.bind_log_functions(request_context.target)
        except Exception as e:
            logger.error(
                "pre_resolution_failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )

        lifecycle.await_completion()
        return lifecycle

    def handle(self, request: Any, response: Any, call_next: Callable[[], Any]) -> Any:
        """
        Middleware entry point for callback-style hosts.

        ``call_next`` is always invoked, whatever happened during resolution.

        Returns:
            Whatever ``call_next`` returns
        """
        try:
            self.start(request, response)
        except Exception as e:
            logger.error("network_log_start_failed", error=str(e), exc_info=True)
        return call_next()

    def emit(self, record: LogRecord) -> None:
        """Apply static overrides and hand the record to the core."""
        self.core.write_static_fields(record)
        self.core.send_log(self.level, record)
