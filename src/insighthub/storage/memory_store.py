"""Summary: In-memory option and transient stores.

Importance: Enables fast, isolated tests and single-process demos without SQLite.
Alternatives: Point the SQLite store at a temporary file for every test.
"""

from __future__ import annotations

import copy
import time
from typing import Any

from insighthub.storage.base import Clock, OptionStore, TransientStore


class MemoryOptionStore(OptionStore):
    """Summary: Dictionary-backed option store.

    Importance: Mirrors the durable store contract for tests.
    Alternatives: Use unittest.mock objects per test.
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class MemoryTransientStore(TransientStore):
    """Summary: Dictionary-backed transient store with clock-driven expiry.

    Importance: Lets tests simulate TTL expiry by advancing a fake clock.
    Alternatives: Sleep in tests until entries expire.
    """

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._values: dict[str, tuple[Any, float | None]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._values.get(key)
        if entry is None:
            return default
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._values[key]
            return default
        return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        self._values[key] = (copy.deepcopy(value), expires_at)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
