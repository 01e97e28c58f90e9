"""
Resolution pass: one ordered sweep over a descriptor list.

1. Each descriptor is resolved in list order and its value written to the
   record, followed by default/fallback handling. Self references are only
   queued.
2. Queued fallbacks run as one batch against the record as it stood when
   the batch began; results are written after the whole batch ran.
3. Queued self references copy their target's value, so they see defaults
   and fallback results of the same pass.

Duplicate names are not an error: the last write wins.
"""

from typing import Any, Dict, List, Sequence, Tuple

from netlog.core.context import ContextAdapter
from netlog.core.defaults import FallbackQueue, apply_defaults
from netlog.core.resolver import UNRESOLVED, Phase, resolve_source
from netlog.infrastructure.logging.config import get_logger
from netlog.models.fields import FieldDescriptor, LogRecord, SelfSource, SpecialSource


logger = get_logger(__name__)


def store_value(record: LogRecord, name: str, value: Any) -> None:
    """Write ``value`` under ``name``; an absent (``None``) value removes the field."""
    if value is None:
        record.pop(name, None)
    else:
        record[name] = value


class ResolutionPass:
    """
    Resolves one phase's descriptors into a shared record.

    Queues are created per ``run`` call, so one instance can serve every
    request of the process concurrently.
    """

    def __init__(self, descriptors: Sequence[FieldDescriptor], phase: Phase):
        self.descriptors: Tuple[FieldDescriptor, ...] = tuple(descriptors)
        self.phase = phase

    def run(self, request: ContextAdapter, response: ContextAdapter, record: LogRecord) -> LogRecord:
        """
        Resolve every descriptor into ``record``.

        Args:
            request: Normalized request context
            response: Normalized response context
            record: The request's record, updated in place

        Returns:
            The same record
        """
        fallbacks: FallbackQueue = {}
        self_references: Dict[str, str] = {}

        for descriptor in self.descriptors:
            source = descriptor.source
            if isinstance(source, SelfSource):
                self_references[descriptor.name] = source.name
                continue

            try:
                value = resolve_source(descriptor, self.phase, request, response, record)
            except Exception as e:
                self._log_failure(descriptor.name, e)
                value = None

            if value is not UNRESOLVED:
                store_value(record, descriptor.name, value)

            if isinstance(source, SpecialSource) and descriptor.fallback is not None:
                fallbacks[descriptor.name] = descriptor.fallback

            apply_defaults(descriptor, record, fallbacks, self.phase)

        self._run_fallbacks(fallbacks, request, response, record)

        for name, target in self_references.items():
            store_value(record, name, record.get(target))

        return record

    def _run_fallbacks(self, fallbacks: FallbackQueue, request: ContextAdapter,
                       response: ContextAdapter, record: LogRecord) -> None:
        results: List[Tuple[str, Any]] = []
        for name, fallback in fallbacks.items():
            if fallback is None:
                logger.debug("missing_mandatory_field", field=name, phase=self.phase.value)
                continue
            try:
                results.append((name, fallback(request.target, response.target, record)))
            except Exception as e:
                self._log_failure(name, e)

        for name, value in results:
            store_value(record, name, value)

    def _log_failure(self, name: str, error: Exception) -> None:
        logger.warning(
            "field_resolution_failed",
            field=name,
            phase=self.phase.value,
            error=str(error),
            error_type=type(error).__name__
        )
