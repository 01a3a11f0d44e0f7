import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from ...domain.repositories.name_cache import DisplayNameCache


class InMemoryDisplayNameCache(DisplayNameCache):
    """Process-local LRU cache with a per-entry time-to-live."""

    def __init__(self, ttl_seconds: int = 300, max_entries: int = 1000,
                 clock: Callable[[], float] = time.monotonic):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()

    async def get(self, email: str) -> Optional[str]:
        key = email.strip().lower()
        entry = self._entries.get(key)
        if entry is None:
            return None

        name, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return name

    async def set(self, email: str, name: str) -> None:
        key = email.strip().lower()
        self._entries[key] = (name, self._clock() + self.ttl_seconds)
        self._entries.move_to_end(key)

        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    async def invalidate(self, email: str) -> None:
        self._entries.pop(email.strip().lower(), None)

    def __len__(self):
        return len(self._entries)
