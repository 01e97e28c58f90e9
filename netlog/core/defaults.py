"""
Default/fallback handling for mandatory fields.

Runs right after a descriptor's primary resolution. A mandatory field
whose record value is still absent gets its static ``default`` at once;
without a default its ``fallback`` is queued for the end of the pass.
"""

from typing import Dict, Optional

from netlog.core.resolver import Phase
from netlog.infrastructure.logging.config import get_logger
from netlog.models.fields import FieldDescriptor, FieldFunction, LogRecord


logger = get_logger(__name__)

FallbackQueue = Dict[str, Optional[FieldFunction]]


def apply_defaults(descriptor: FieldDescriptor, record: LogRecord,
                   fallbacks: FallbackQueue, phase: Phase) -> None:
    """
    Default or queue a fallback for an absent mandatory field.

    The queue is keyed by field name, so a later descriptor with the same
    name replaces an earlier queued fallback. A queued ``None`` marks a
    mandatory field with neither default nor fallback; the pass leaves it
    absent.

    Args:
        descriptor: Descriptor that was just resolved
        record: Record holding the current value under ``descriptor.name``
        fallbacks: Deferred fallback queue of the running pass
        phase: Phase of the running pass, for diagnostics
    """
    if not descriptor.mandatory or record.get(descriptor.name) is not None:
        return

    if descriptor.default is not None:
        record[descriptor.name] = descriptor.default
        return

    logger.info("falling_back_for_field", field=descriptor.name, phase=phase.value)
    fallbacks[descriptor.name] = descriptor.fallback
