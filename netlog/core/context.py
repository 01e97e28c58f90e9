"""
Host context adapter.

Wraps a host request or response object in a stable interface so the
resolution engine never has to probe capabilities itself. Missing
capabilities are replaced by empty or no-op implementations once, when
the adapter is constructed:

- header reads return ``""`` when the host exposes no header accessor
- completion listeners are dropped when the host has no completion event
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Optional

from netlog.infrastructure.logging.config import get_logger


logger = get_logger(__name__)

COMPLETION_EVENT = "finish"

CompletionListener = Callable[[], Any]


def _empty_header(name: str) -> str:
    return ""


def _mapping_header_reader(headers: Mapping) -> Callable[[str], Any]:
    """Case-insensitive lookup over a plain header mapping."""
    def read(name: str) -> Any:
        if name in headers:
            return headers[name]
        lowered = name.lower()
        for key, value in headers.items():
            if isinstance(key, str) and key.lower() == lowered:
                return value
        return None
    return read


class ContextAdapter:
    """
    Capability-normalized view over a host request or response.

    Attributes:
        target: The wrapped host object, handed unchanged to fallbacks and
            time functions
        supports_headers: Whether the host exposes a header accessor
        supports_completion: Whether completion listeners can be registered
    """

    def __init__(self, target: Any):
        self.target = target
        self._read_header = self._detect_header_reader(target)
        self._register_completion = self._detect_completion_registrar(target)
        self.supports_headers = self._read_header is not _empty_header
        self.supports_completion = self._register_completion is not None

    @staticmethod
    def _detect_header_reader(target: Any) -> Callable[[str], Any]:
        for accessor in ("header", "get_header"):
            reader = getattr(target, accessor, None)
            if callable(reader):
                return reader

        headers = getattr(target, "headers", None)
        if headers is None and isinstance(target, Mapping):
            headers = target.get("headers")

        if isinstance(headers, Mapping) and not hasattr(headers, "getlist"):
            return _mapping_header_reader(headers)
        if headers is not None and callable(getattr(headers, "get", None)):
            return headers.get
        return _empty_header

    @staticmethod
    def _detect_completion_registrar(target: Any) -> Optional[Callable[[CompletionListener], Any]]:
        on_completion = getattr(target, "on_completion", None)
        if callable(on_completion):
            return on_completion

        on = getattr(target, "on", None)
        if callable(on):
            return lambda listener: on(COMPLETION_EVENT, listener)
        return None

    def read_header(self, name: str) -> Any:
        """Header value, ``None`` when the header is missing, ``""`` without header support."""
        return self._read_header(name)

    def read_field(self, name: str) -> Any:
        """Attribute (or mapping item) of the host object, ``None`` when absent."""
        target = self.target
        if isinstance(target, dict):
            return target.get(name)
        value = getattr(target, name, None)
        if value is None and isinstance(target, Mapping):
            value = target.get(name)
        return value

    def read_stored(self, name: str) -> Any:
        """Read back a value stored with ``write_field``, ``None`` when absent."""
        holder = getattr(self.target, "state", None)
        if holder is not None:
            return getattr(holder, name, None)
        if isinstance(self.target, Mapping):
            return self.target.get(name)
        return getattr(self.target, name, None)

    def write_field(self, name: str, value: Any) -> None:
        """
        Store a value on the host object for downstream consumers.

        Starlette-style objects keep it on ``state``; mappings get an item;
        anything else gets an attribute. Hosts that refuse the write are
        left untouched.
        """
        if isinstance(self.target, MutableMapping):
            self.target[name] = value
            return

        holder = getattr(self.target, "state", None)
        if holder is None:
            holder = self.target
        try:
            setattr(holder, name, value)
        except (AttributeError, TypeError) as e:
            logger.debug("context_field_not_writable", field=name, error=str(e))

    def on_completion(self, listener: CompletionListener) -> bool:
        """
        Register a completion listener.

        Returns:
            True when registered, False when the host has no completion event
        """
        if self._register_completion is None:
            logger.debug("completion_event_unavailable", host_type=type(self.target).__name__)
            return False
        self._register_completion(listener)
        return True
