# File: netlog/models/interfaces.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from netlog.models.fields import FieldDescriptor


class ILoggingCore(ABC):
    """Interface of the logging core the network pipeline hands records to.

    The core owns field configuration, correlation IDs, level filtering,
    static overrides and emission. The resolution engine only reads the
    descriptor lists and calls the record lifecycle hooks below.

    Pass-through calls (``set_logging_level``, ``set_log_pattern``,
    ``override_field``, ``get_correlation_object``, ``log_message``) may be
    invoked before or during traffic and must never mutate a record that is
    still being resolved.
    """

    @abstractmethod
    def init_log(self) -> Dict[str, Any]:
        """Create the record for a newly arrived request.

        Returns:
            A fresh, request-owned mapping, empty or pre-seeded
        """
        pass

    @abstractmethod
    def get_pre_log_config(self) -> List[FieldDescriptor]:
        """Descriptors resolved when the request arrives"""
        pass

    @abstractmethod
    def get_post_log_config(self) -> List[FieldDescriptor]:
        """Descriptors resolved when the response completes"""
        pass

    @abstractmethod
    def bind_log_functions(self, request: Any) -> None:
        """Attach contextual logging helpers to the request.

        Args:
            request: Host request object, already carrying ``log_record``
        """
        pass

    @abstractmethod
    def write_static_fields(self, record: Dict[str, Any]) -> None:
        """Apply operator-configured overrides right before emission."""
        pass

    @abstractmethod
    def send_log(self, level: str, record: Dict[str, Any]) -> None:
        """Transport a finished record.

        Args:
            level: Severity name, ``"info"`` for network activity
            record: The finished record
        """
        pass

    @abstractmethod
    def set_logging_level(self, level: str) -> None:
        pass

    @abstractmethod
    def set_log_pattern(self, pattern: Optional[str]) -> None:
        pass

    @abstractmethod
    def override_field(self, name: str, value: Any) -> bool:
        pass

    @abstractmethod
    def get_correlation_object(self) -> Any:
        pass

    @abstractmethod
    def log_message(self, level: str, message: str, **fields: Any) -> None:
        pass
