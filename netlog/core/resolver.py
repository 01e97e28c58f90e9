"""
Source resolver: reads the primary value of one field descriptor.

Resolution is a pure read. It returns either the value found (``None``
included, meaning "absent") or ``UNRESOLVED`` when the source writes
nothing in the current phase. Self references and special sources are
always ``UNRESOLVED`` here; the resolution pass handles them afterwards.
"""

from enum import Enum
from typing import Any, Callable, Dict

from netlog.core.context import ContextAdapter
from netlog.models.fields import (
    FieldDescriptor,
    FieldSource,
    HeaderSource,
    LogRecord,
    SelfSource,
    SpecialSource,
    StaticSource,
    TimeSource,
)


# Value of a pre-phase time field that has no pre function
PRE_TIME_DEFAULT = -1


class Phase(str, Enum):
    """Resolution phase of a request."""
    PRE = "pre"
    POST = "post"


class _Unresolved:
    """Marker for sources that do not write in the current phase."""

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED = _Unresolved()


def _resolve_header(source: HeaderSource, phase: Phase, request: ContextAdapter,
                    response: ContextAdapter, record: LogRecord) -> Any:
    context = request if phase is Phase.PRE else response
    return context.read_header(source.name)


def _resolve_field(source: FieldSource, phase: Phase, request: ContextAdapter,
                   response: ContextAdapter, record: LogRecord) -> Any:
    context = request if phase is Phase.PRE else response
    return context.read_field(source.name)


def _resolve_static(source: StaticSource, phase: Phase, request: ContextAdapter,
                    response: ContextAdapter, record: LogRecord) -> Any:
    # Static values belong to the pre phase only
    if phase is Phase.PRE:
        return source.value
    return UNRESOLVED


def _resolve_time(source: TimeSource, phase: Phase, request: ContextAdapter,
                  response: ContextAdapter, record: LogRecord) -> Any:
    if phase is Phase.PRE:
        if source.pre is None:
            return PRE_TIME_DEFAULT
        return source.pre(request.target, response.target, record)

    if source.post is None:
        return UNRESOLVED
    return source.post(request.target, response.target, record)


def _resolve_deferred(source: Any, phase: Phase, request: ContextAdapter,
                      response: ContextAdapter, record: LogRecord) -> Any:
    return UNRESOLVED


_RESOLVERS: Dict[type, Callable[..., Any]] = {
    HeaderSource: _resolve_header,
    FieldSource: _resolve_field,
    StaticSource: _resolve_static,
    TimeSource: _resolve_time,
    SelfSource: _resolve_deferred,
    SpecialSource: _resolve_deferred,
}


def resolve_source(descriptor: FieldDescriptor, phase: Phase, request: ContextAdapter,
                   response: ContextAdapter, record: LogRecord) -> Any:
    """
    Resolve the primary value of ``descriptor``.

    Args:
        descriptor: Field to resolve
        phase: PRE reads the request, POST reads the response
        request: Normalized request context
        response: Normalized response context
        record: Current record, read-only here

    Returns:
        The resolved value, ``None`` for absent, or ``UNRESOLVED``
    """
    source = descriptor.source
    return _RESOLVERS[type(source)](source, phase, request, response, record)
