"""ABOUTME: Session store contract used to hold one selection registry per user session.

The registry does not own sessions. It only needs property access plus an
atomic set-if-absent, which is what makes registry creation exactly-once when
several requests of the same session race on first access.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

# Session property keys
SELECTED_RESULT = "selection.registry"
SEARCH_REQUEST = "search.request"
SEARCH_RESULT = "search.result"


class SessionStore(ABC):
    """Property bag of a single user session."""

    @abstractmethod
    def get_property(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set_property(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def set_property_if_absent(self, key: str, value: Any) -> Any:
        """Store value unless key is already set.

        Returns:
            The value stored under key after the call: either value, or the
            one another caller installed first.
        """
        pass


class InMemorySession(SessionStore):
    """Thread-safe in-process session."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id
        self._properties: dict[str, Any] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"InMemorySession(session_id={self.session_id!r})"

    def get_property(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._properties.get(key)

    def set_property(self, key: str, value: Any) -> None:
        with self._lock:
            self._properties[key] = value

    def set_property_if_absent(self, key: str, value: Any) -> Any:
        with self._lock:
            existing = self._properties.get(key)
            if existing is not None:
                return existing
            self._properties[key] = value
            return value
