# File: netlog/models/fields.py
"""
Field descriptor model for network log records.

A descriptor declares the name of one log field and where its value comes
from. Sources form a closed, tagged set distinguished by their ``type``
literal, so declarative dictionaries (for example loaded from JSON) validate
straight into descriptors:

    >>> FieldDescriptor.model_validate(
    ...     {"name": "ip", "source": {"type": "header", "name": "x-forwarded-for"}}
    ... )

Callables (fallbacks and time functions) take ``(request, response, record)``
and may be given directly or as an import reference ``"package.module:attr"``.
"""

import importlib
from typing import Annotated, Any, Callable, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from netlog.exceptions import FieldConfigError


LogRecord = Dict[str, Any]
FieldFunction = Callable[[Any, Any, LogRecord], Any]


def resolve_callable_reference(value: Any) -> Any:
    """Turn an import reference into the callable it names.

    ``None`` and callables are returned unchanged.

    Raises:
        FieldConfigError: If the reference is malformed, cannot be imported
            or does not name a callable
    """
    if value is None or callable(value):
        return value

    if not isinstance(value, str):
        raise FieldConfigError(
            f"Expected a callable or import reference, got {type(value).__name__}",
            context={"value": repr(value)}
        )

    module_name, sep, attr_path = value.partition(":")
    if not sep or not module_name or not attr_path:
        raise FieldConfigError(
            f"Invalid callable reference '{value}', expected 'package.module:attribute'",
            context={"reference": value}
        )

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise FieldConfigError(
            f"Cannot import module '{module_name}' for reference '{value}'",
            context={"reference": value, "original_error": str(e)}
        ) from e

    for part in attr_path.split("."):
        if not hasattr(target, part):
            raise FieldConfigError(
                f"Reference '{value}' does not resolve: missing attribute '{part}'",
                context={"reference": value}
            )
        target = getattr(target, part)

    if not callable(target):
        raise FieldConfigError(
            f"Reference '{value}' does not name a callable",
            context={"reference": value}
        )
    return target


class HeaderSource(BaseModel):
    """Read a header: request headers in the pre phase, response headers in the post phase."""
    model_config = ConfigDict(frozen=True)

    type: Literal["header"] = "header"
    name: str


class StaticSource(BaseModel):
    """Literal value. Only the pre phase writes static values."""
    model_config = ConfigDict(frozen=True)

    type: Literal["static"] = "static"
    value: Any = None


class FieldSource(BaseModel):
    """Read an attribute off the request (pre phase) or the response (post phase)."""
    model_config = ConfigDict(frozen=True)

    type: Literal["field"] = "field"
    name: str


class SelfSource(BaseModel):
    """Alias of another record field, copied after the phase's fallbacks ran."""
    model_config = ConfigDict(frozen=True)

    type: Literal["self"] = "self"
    name: str


class TimeSource(BaseModel):
    """Computed value, with one optional function per phase."""
    model_config = ConfigDict(frozen=True)

    type: Literal["time"] = "time"
    pre: Optional[FieldFunction] = None
    post: Optional[FieldFunction] = None

    @field_validator("pre", "post", mode="before")
    @classmethod
    def _resolve_reference(cls, value: Any) -> Any:
        return resolve_callable_reference(value)


class SpecialSource(BaseModel):
    """No direct source, the value always comes from the descriptor's fallback."""
    model_config = ConfigDict(frozen=True)

    type: Literal["special"] = "special"


# Field sources read the request in the pre phase and the response in the post phase
RequestFieldSource = FieldSource
ResponseFieldSource = FieldSource

FieldSourceSpec = Annotated[
    Union[HeaderSource, StaticSource, FieldSource, SelfSource, TimeSource, SpecialSource],
    Field(discriminator="type")
]


class FieldDescriptor(BaseModel):
    """Declarative description of one log field.

    Attributes:
        name: Record key. Names may repeat; the later write wins.
        source: Where the value is read from
        mandatory: Whether an absent value must be defaulted or produced by ``fallback``
        default: Literal used for a mandatory field without a value
        fallback: ``(request, response, record) -> value`` for mandatory fields
            without value or default, and for ``special`` sources
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    source: FieldSourceSpec
    mandatory: bool = False
    default: Any = None
    fallback: Optional[FieldFunction] = None

    @field_validator("fallback", mode="before")
    @classmethod
    def _resolve_fallback(cls, value: Any) -> Any:
        return resolve_callable_reference(value)


class FieldConfig(BaseModel):
    """Ordered descriptor lists for the pre and post phases.

    Established once before traffic starts and never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    pre: Tuple[FieldDescriptor, ...] = ()
    post: Tuple[FieldDescriptor, ...] = ()
