"""ABOUTME: Internally synchronized set of selected keys for one namespace.

Every public method takes the namespace lock, so callers never lock externally.
Compound updates that must appear atomic to readers (clear then add) go through
replace(), which holds the lock across both steps.
"""

import threading
from typing import Iterable, Iterator

from .actions import is_blank_key


class Selection:
    """Unordered set of selected keys guarded by a re-entrant lock."""

    def __init__(self, keys: Iterable[str] = ()):
        self._lock = threading.RLock()
        self._keys: set[str] = set(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"Selection(size={len(self)})"

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def snapshot(self) -> frozenset[str]:
        """Point-in-time copy, safe to iterate while others mutate."""
        with self._lock:
            return frozenset(self._keys)

    def add(self, key: str) -> bool:
        """Add one key. Returns True if it was not already selected."""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def update(self, keys: Iterable[str]) -> bool:
        """Add many keys. Returns True if the set changed."""
        with self._lock:
            before = len(self._keys)
            self._keys.update(keys)
            return len(self._keys) != before

    def discard_all(self, keys: Iterable[str]) -> None:
        with self._lock:
            for key in keys:
                self._keys.discard(key)

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()

    def replace(self, keys: Iterable[str]) -> None:
        """Clear then add under one hold of the lock."""
        keys = list(keys)
        with self._lock:
            self._keys.clear()
            self._keys.update(keys)

    def purge_blank(self) -> int:
        """Drop None and empty-string keys. Returns the resulting size."""
        with self._lock:
            blanks = [k for k in self._keys if is_blank_key(k)]
            for key in blanks:
                self._keys.discard(key)
            return len(self._keys)
