"""Transient cache for Canto API responses"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("CantoCache")

CACHE_PREFIX = "acf_canto_"
CACHE_TTL_SECONDS = 3600

SEARCH_NAMESPACE = "search"
ASSET_NAMESPACE = "asset"
TREE_NAMESPACE = "tree"
ALBUM_NAMESPACE = "album"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: datetime


def _canonical(params: Dict[str, Any]) -> str:
    return json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)


def make_cache_key(namespace: str, params: Dict[str, Any]) -> str:
    """Namespaced key derived from the semantic request, independent of option order"""
    digest = hashlib.md5(_canonical(params).encode("utf-8")).hexdigest()
    return f"{CACHE_PREFIX}{namespace}_{digest}"


def search_cache_key(query: str, options: Dict[str, Any]) -> str:
    return make_cache_key(SEARCH_NAMESPACE, {"query": query, **options})


def asset_cache_key(asset_id: str) -> str:
    return f"{CACHE_PREFIX}{ASSET_NAMESPACE}_{asset_id}"


class TransientCache:
    """Passively expiring key/value store shared by every request.

    Entries are written once with a fixed lifetime and never updated in place;
    a second write for the same key simply replaces the first. Keys outside
    ``CACHE_PREFIX`` may live in the same store and are left alone by
    ``invalidate_all``.
    """

    def __init__(
        self,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._entries: Dict[str, CacheEntry] = {}
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        logger.info(f"Initialized TransientCache with TTL: {ttl_seconds} seconds")

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or an expired entry"""
        entry = self._entries.get(key)
        if not entry:
            logger.debug("Cache miss for %s", key)
            return None

        if self._clock() > entry.expires_at:
            logger.debug("Cache entry %s has expired", key)
            del self._entries[key]
            return None

        logger.debug("Cache hit for %s", key)
        return entry.value

    def set(self, key: str, value: Any) -> CacheEntry:
        entry = CacheEntry(
            key=key,
            value=value,
            expires_at=self._clock() + timedelta(seconds=self.ttl_seconds),
        )
        self._entries[key] = entry
        return entry

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def cleanup_expired(self) -> int:
        """Remove expired entries from the store"""
        now = self._clock()
        expired_keys = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired_keys:
            del self._entries[key]

        if expired_keys:
            logger.info(f"Cleaned up {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def invalidate_all(self, prefix: str = CACHE_PREFIX) -> int:
        """Drop every entry under ``prefix``, expired or not"""
        if not prefix:
            raise ValueError("Refusing to invalidate the cache without a key prefix")

        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]

        logger.info("Cleared %d cached entries under %s", len(doomed), prefix)
        return len(doomed)
