"""Field-resolution engine for network log records."""

from .context import ContextAdapter
from .defaults import apply_defaults
from .pipeline import NETWORK_LOG_LEVEL, RECORD_FIELD, NetworkLogPipeline, PipelineState, RequestLifecycle
from .resolution import ResolutionPass, store_value
from .resolver import PRE_TIME_DEFAULT, UNRESOLVED, Phase, resolve_source

__all__ = [
    'ContextAdapter',
    'apply_defaults',
    'NETWORK_LOG_LEVEL',
    'RECORD_FIELD',
    'NetworkLogPipeline',
    'PipelineState',
    'RequestLifecycle',
    'ResolutionPass',
    'store_value',
    'PRE_TIME_DEFAULT',
    'UNRESOLVED',
    'Phase',
    'resolve_source',
]
