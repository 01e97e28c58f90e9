"""Data models shared by the resolution engine and the logging core."""

from .fields import (
    FieldConfig,
    FieldDescriptor,
    FieldFunction,
    FieldSource,
    FieldSourceSpec,
    HeaderSource,
    LogRecord,
    RequestFieldSource,
    ResponseFieldSource,
    SelfSource,
    SpecialSource,
    StaticSource,
    TimeSource,
    resolve_callable_reference,
)
from .interfaces import ILoggingCore

__all__ = [
    'FieldConfig',
    'FieldDescriptor',
    'FieldFunction',
    'FieldSource',
    'FieldSourceSpec',
    'HeaderSource',
    'LogRecord',
    'RequestFieldSource',
    'ResponseFieldSource',
    'SelfSource',
    'SpecialSource',
    'StaticSource',
    'TimeSource',
    'resolve_callable_reference',
    'ILoggingCore',
]
