"""ASGI middleware."""

from .logging import NetworkLoggingMiddleware, ResponseHandle

__all__ = ['NetworkLoggingMiddleware', 'ResponseHandle']
