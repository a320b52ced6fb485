"""In-memory TTL cache for slow-changing reference reads (categories, dashboard counts, token lookups)."""
import time
import logging
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class TTLCache:
    """Key -> (value, stored_at, ttl). Unbounded; expired entries are dropped on read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float, float]] = {}

    def set(self, key: str, value: Any, ttl_seconds: float = DEFAULT_TTL_SECONDS) -> None:
        self._entries[key] = (value, self._clock(), ttl_seconds)

    def _lookup(self, key: str) -> Tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        value, stored_at, ttl = entry
        if self._clock() - stored_at >= ttl:
            del self._entries[key]
            return False, None
        return True, value

    def get(self, key: str) -> Optional[Any]:
        return self._lookup(key)[1]

    def has(self, key: str) -> bool:
        return self._lookup(key)[0]

    def get_or_set(self, key: str, loader: Callable[[], Any], ttl_seconds: float = DEFAULT_TTL_SECONDS) -> Any:
        """Return the cached value for key, calling loader and caching its result on a miss."""
        hit, value = self._lookup(key)
        if hit:
            return value
        value = loader()
        self.set(key, value, ttl_seconds)
        return value

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_all(self) -> None:
        if self._entries:
            logger.debug(f"Clearing {len(self._entries)} cache entries")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
