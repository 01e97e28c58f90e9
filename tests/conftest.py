"""Shared pytest fixtures and configuration for netlog tests."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from netlog.config.settings import reset_settings
from netlog.infrastructure.logging.coordinator import request_context
from netlog.models.interfaces import ILoggingCore


class FakeRequest:
    """Callback-style host request: plain header dict plus arbitrary fields."""

    def __init__(self, headers: Optional[Dict[str, str]] = None, **fields):
        self.headers = dict(headers or {})
        for name, value in fields.items():
            setattr(self, name, value)


class FakeResponse:
    """Callback-style host response with a ``finish`` event."""

    def __init__(self, headers: Optional[Dict[str, str]] = None, **fields):
        self.headers = dict(headers or {})
        self._listeners: Dict[str, List[Any]] = {}
        for name, value in fields.items():
            setattr(self, name, value)

    def on(self, event: str, listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def emit(self, event: str, *args) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener(*args)


class RecordingCore(ILoggingCore):
    """Logging core that keeps everything it is handed."""

    def __init__(self, pre=(), post=(), seed: Optional[Dict[str, Any]] = None):
        self.pre = list(pre)
        self.post = list(post)
        self.seed = dict(seed or {})
        self.sent: List[Tuple[str, Dict[str, Any]]] = []
        self.bound: List[Any] = []
        self.overrides: Dict[str, Any] = {}
        self.calls: List[Tuple[str, tuple]] = []

    def init_log(self) -> Dict[str, Any]:
        return dict(self.seed)

    def get_pre_log_config(self):
        return self.pre

    def get_post_log_config(self):
        return self.post

    def bind_log_functions(self, request) -> None:
        self.bound.append(request)

    def write_static_fields(self, record) -> None:
        record.update(self.overrides)

    def send_log(self, level, record) -> None:
        self.sent.append((level, dict(record)))

    def set_logging_level(self, level) -> None:
        self.calls.append(("set_logging_level", (level,)))

    def set_log_pattern(self, pattern) -> None:
        self.calls.append(("set_log_pattern", (pattern,)))

    def override_field(self, name, value) -> bool:
        self.calls.append(("override_field", (name, value)))
        self.overrides[name] = value
        return True

    def get_correlation_object(self):
        self.calls.append(("get_correlation_object", ()))
        return "correlation-object"

    def log_message(self, level, message, **fields) -> None:
        self.calls.append(("log_message", (level, message, fields)))


@pytest.fixture
def make_request():
    """Factory for callback-style host requests."""
    return FakeRequest


@pytest.fixture
def make_response():
    """Factory for callback-style host responses."""
    return FakeResponse


@pytest.fixture
def make_core():
    """Factory for recording logging cores."""
    return RecordingCore


@pytest.fixture(autouse=True)
def isolated_state():
    """Fresh settings singleton and no active request context per test."""
    reset_settings()
    token = request_context.set(None)
    yield
    request_context.reset(token)
    reset_settings()
