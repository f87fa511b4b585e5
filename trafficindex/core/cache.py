"""
Time-bounded in-memory cache
"""

import time
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Keyed memo whose entries expire a fixed number of seconds after being set

    The clock is injectable so expiry can be driven from tests. Entries are
    replaced, never mutated; an expired entry is dropped on the next read.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl < 0:
            raise ValueError("TTL must be non-negative")
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, Tuple[T, float]] = {}

    def get(self, key: str) -> Optional[T]:
        """Return the live value for key, or None when absent or expired"""
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = (value, self.clock() + self.ttl)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None
