"""
In-memory TTL cache

Caches expensive pipeline results (storylines, videos, thumbnails) keyed by
a deterministic hash of the request parameters. Entries expire lazily: an
expired entry is removed the first time it is observed, and ``cleanup()``
sweeps explicitly. There is no background sweeper.

Concurrent misses on the same key are not coalesced: each caller computes
independently and the last successful result wins.
"""

import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from roastcast.core.logging import get_logger

logger = get_logger(__name__, component="cache")

T = TypeVar("T")

KEY_DIGEST_LENGTH = 16


@dataclass
class CacheEntry:
    """A cached value and its lifetime (clock seconds)"""
    value: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class TTLCache:
    """
    Key-value store with per-entry time-to-live.

    ``None`` is used as the miss marker, so ``None`` itself is never stored.
    The clock is injectable (monotonic seconds) so tests can move time forward
    without sleeping.
    """

    def __init__(
        self,
        default_ttl: float = 5 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def generate_key(prefix: str, params: Mapping[str, Any]) -> str:
        """
        Build a cache key from a prefix and a parameter mapping.

        Parameter names are sorted before serialization, so insertion order
        does not matter. The serialized form is reduced to a fixed-width digest.

        Args:
            prefix: Namespace for the key (e.g. "storyline", "video")
            params: JSON-serializable parameters

        Returns:
            Key of the form ``"<prefix>:<16 hex chars>"``
        """
        serialized = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
        digest = hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:KEY_DIGEST_LENGTH]
        return f"{prefix}:{digest}"

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        if value is None:
            raise ValueError("Cannot cache None; it is reserved as the miss marker")
        ttl = self.default_ttl if ttl is None else ttl
        now = self._clock()
        self._entries[key] = CacheEntry(value=value, created_at=now, expires_at=now + ttl)

    async def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None,
    ) -> T:
        """
        Return the cached value for ``key`` or compute, store and return it.

        Exceptions raised by ``compute_fn`` propagate and leave the cache
        untouched, so the next call computes again.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache HIT: {key}", extra={"cache_key": key})
            return cached

        logger.debug(f"Cache MISS: {key}", extra={"cache_key": key})
        value = await compute_fn()
        if value is not None:
            self.set(key, value, ttl)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Remove expired entries and return how many were removed"""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cache cleanup", extra={"removed": len(expired)})
        return len(expired)

    def get_stats(self) -> Dict[str, int]:
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        total = len(self._entries)
        return {
            "total": total,
            "valid": total - expired,
            "expired": expired,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
