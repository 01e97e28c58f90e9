"""
Exception classes for the netlog package.

Errors are raised only while configuration is being loaded or validated.
The request path never raises into the host application: resolution
problems are logged and the affected field is left out of the record.
"""

from typing import Any, Dict, Optional


class NetlogError(Exception):
    """Base exception for netlog"""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "NETLOG_ERROR"
        self.context = context or {}

    def __str__(self):
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(NetlogError):
    """Settings or logging-core configuration errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "CONFIG_ERROR", context)


class FieldConfigError(ConfigurationError):
    """Invalid field descriptor configuration"""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "FIELD_CONFIG_ERROR", context)
