"""
netlog - structured network activity logging

Builds one structured record per request from a declarative list of
field descriptors, resolved once when the request arrives and once when
the response completes, and hands it to a logging core.
"""

from .core import NetworkLogPipeline, PipelineState, RequestLifecycle
from .models import (
    FieldConfig,
    FieldDescriptor,
    FieldSource,
    HeaderSource,
    ILoggingCore,
    RequestFieldSource,
    ResponseFieldSource,
    SelfSource,
    SpecialSource,
    StaticSource,
    TimeSource,
)
from .network import NetworkLogging

__version__ = "1.0.0"

__all__ = [
    'NetworkLogPipeline',
    'PipelineState',
    'RequestLifecycle',
    'FieldConfig',
    'FieldDescriptor',
    'FieldSource',
    'HeaderSource',
    'ILoggingCore',
    'RequestFieldSource',
    'ResponseFieldSource',
    'SelfSource',
    'SpecialSource',
    'StaticSource',
    'TimeSource',
    'NetworkLogging',
]
