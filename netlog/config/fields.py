"""
Built-in network field set and declarative field configuration.

The helper functions below follow the ``(request, response, record)``
signature of fallbacks and time functions and can be referenced from a
JSON field configuration, e.g. ``"netlog.config.fields:new_correlation_id"``.
They read Starlette-style hosts (``client``, ``url``, ``scope``) and return
``None`` for anything they cannot find.
"""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from netlog.exceptions import FieldConfigError
from netlog.models.fields import (
    FieldConfig,
    FieldDescriptor,
    FieldSource,
    HeaderSource,
    LogRecord,
    SelfSource,
    SpecialSource,
    StaticSource,
    TimeSource,
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_correlation_id(request: Any, response: Any, record: LogRecord) -> str:
    return str(uuid.uuid4())


def received_at(request: Any, response: Any, record: LogRecord) -> str:
    return _timestamp()


def sent_at(request: Any, response: Any, record: LogRecord) -> str:
    return _timestamp()


def response_time_ms(request: Any, response: Any, record: LogRecord) -> Optional[float]:
    """Milliseconds between ``request_received_at`` and ``response_sent_at``."""
    received = record.get("request_received_at")
    sent = record.get("response_sent_at")
    if not isinstance(received, str) or not isinstance(sent, str):
        return None
    try:
        delta = datetime.fromisoformat(sent) - datetime.fromisoformat(received)
    except ValueError:
        return None
    return round(delta.total_seconds() * 1000, 3)


def client_host(request: Any, response: Any, record: LogRecord) -> Optional[str]:
    client = getattr(request, "client", None)
    return getattr(client, "host", None)


def client_port(request: Any, response: Any, record: LogRecord) -> Optional[int]:
    client = getattr(request, "client", None)
    return getattr(client, "port", None)


def http_protocol(request: Any, response: Any, record: LogRecord) -> Optional[str]:
    scope = getattr(request, "scope", None)
    if not isinstance(scope, dict) or not scope.get("http_version"):
        return None
    return f"HTTP/{scope['http_version']}"


def request_path(request: Any, response: Any, record: LogRecord) -> Optional[str]:
    """Path plus query string of the request URL."""
    url = getattr(request, "url", None)
    path = getattr(url, "path", None)
    if path is None:
        return getattr(request, "path", None)
    query = getattr(url, "query", "")
    return f"{path}?{query}" if query else path


def default_pre_fields(component_name: str = "netlog", layer: str = "[PY] NET") -> List[FieldDescriptor]:
    """Descriptors resolved when a request arrives."""
    return [
        FieldDescriptor(name="type", source=StaticSource(value="request")),
        FieldDescriptor(name="component_type", source=StaticSource(value="application")),
        FieldDescriptor(name="component_name", source=StaticSource(value=component_name)),
        FieldDescriptor(name="layer", source=StaticSource(value=layer)),
        FieldDescriptor(name="direction", source=StaticSource(value="IN")),
        FieldDescriptor(
            name="correlation_id",
            source=HeaderSource(name="x-correlation-id"),
            mandatory=True,
            fallback=new_correlation_id
        ),
        FieldDescriptor(name="request_id", source=HeaderSource(name="x-request-id")),
        FieldDescriptor(name="request_received_at", source=TimeSource(pre=received_at)),
        FieldDescriptor(name="method", source=FieldSource(name="method"), mandatory=True, default="-"),
        FieldDescriptor(name="request", source=SpecialSource(), fallback=request_path),
        FieldDescriptor(name="protocol", source=SpecialSource(), fallback=http_protocol),
        FieldDescriptor(name="remote_ip", source=SpecialSource(), fallback=client_host),
        FieldDescriptor(name="remote_host", source=SelfSource(name="remote_ip")),
        FieldDescriptor(name="remote_port", source=SpecialSource(), fallback=client_port),
        FieldDescriptor(
            name="request_size_b",
            source=HeaderSource(name="content-length"),
            mandatory=True,
            default=-1
        ),
        FieldDescriptor(name="referer", source=HeaderSource(name="referer"), mandatory=True, default="-"),
        FieldDescriptor(
            name="x_forwarded_for",
            source=HeaderSource(name="x-forwarded-for"),
            mandatory=True,
            default="-"
        ),
    ]


def default_post_fields() -> List[FieldDescriptor]:
    """Descriptors resolved when the response completes."""
    return [
        FieldDescriptor(name="response_sent_at", source=TimeSource(post=sent_at)),
        FieldDescriptor(
            name="response_time_ms",
            source=TimeSource(post=response_time_ms),
            mandatory=True,
            default=-1
        ),
        FieldDescriptor(
            name="response_status",
            source=FieldSource(name="status_code"),
            mandatory=True,
            default=-1
        ),
        FieldDescriptor(
            name="response_content_type",
            source=HeaderSource(name="content-type"),
            mandatory=True,
            default="-"
        ),
        FieldDescriptor(
            name="response_size_b",
            source=HeaderSource(name="content-length"),
            mandatory=True,
            default=-1
        ),
        FieldDescriptor(name="written_at", source=SelfSource(name="response_sent_at")),
    ]


def default_field_config(component_name: str = "netlog", layer: str = "[PY] NET") -> FieldConfig:
    return FieldConfig(
        pre=default_pre_fields(component_name=component_name, layer=layer),
        post=default_post_fields()
    )


def load_field_config(path: Union[str, Path]) -> FieldConfig:
    """
    Load descriptor lists from a JSON document.

    The document holds ``{"pre": [...], "post": [...]}`` where each entry is
    a descriptor dictionary; callables are given as import references.

    Args:
        path: Location of the JSON document

    Returns:
        The validated FieldConfig

    Raises:
        FieldConfigError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FieldConfigError(
            f"Cannot read field configuration '{path}'",
            context={"path": str(path), "original_error": str(e)}
        ) from e
    except json.JSONDecodeError as e:
        raise FieldConfigError(
            f"Field configuration '{path}' is not valid JSON: {e.msg}",
            context={"path": str(path), "line": e.lineno}
        ) from e

    if not isinstance(data, dict):
        raise FieldConfigError(
            f"Field configuration '{path}' must be an object with 'pre' and 'post' lists",
            context={"path": str(path)}
        )

    try:
        return FieldConfig.model_validate(data)
    except ValidationError as e:
        raise FieldConfigError(
            f"Invalid field configuration '{path}': {e.error_count()} error(s)",
            context={"path": str(path), "errors": e.errors(include_url=False)}
        ) from e
