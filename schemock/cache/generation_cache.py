# -*- coding: utf-8 -*-
"""Location: ./schemock/cache/generation_cache.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Generation Result Cache.
This module implements a bounded in-memory cache for generated mock values,
keyed by schema fingerprint. Features:
- O(1) get/set/evict (hash map plus recency ordering)
- Maximum size limit with LRU eviction
- Optional TTL expiration (an expired entry is a miss and is removed)
- Thread-safe operations

Examples:
    >>> from schemock.cache.generation_cache import GenerationCache
    >>> from unittest.mock import patch
    >>> cache = GenerationCache(max_size=2, ttl=1)
    >>> cache.set('a', 1)
    >>> cache.get('a')
    1

    Test TTL expiration using mocked time (no actual sleep):

    >>> with patch("time.time") as mock_time:
    ...     mock_time.return_value = 1000
    ...     cache2 = GenerationCache(max_size=2, ttl=1)
    ...     cache2.set('x', 100)
    ...     cache2.get('x')  # Before expiration
    ...     mock_time.return_value = 1002  # Advance past TTL
    ...     cache2.get('x') is None  # After expiration
    100
    True

    Test LRU eviction:

    >>> cache.set('a', 1)
    >>> cache.set('b', 2)
    >>> cache.set('c', 3)  # LRU eviction
    >>> sorted(cache._cache.keys())
    ['b', 'c']
    >>> cache.delete('b')
    >>> cache.get('b') is None
    True
    >>> cache.clear()
    >>> cache.get('a') is None
    True
"""

# Standard
from collections import OrderedDict
import copy
from dataclasses import dataclass
import threading
import time
from typing import Any, Dict, Optional

# First-Party
from schemock.exceptions import ConfigurationError
from schemock.services.logging_service import LoggingService

logging_service = LoggingService()
logger = logging_service.get_logger(__name__)


@dataclass
class CacheEntry:
    """Cache entry with write timestamp and optional expiry.

    Examples:
        >>> entry = CacheEntry(value={"id": 1}, written_at=10.0, expires_at=None)
        >>> entry.is_expired(1e12)
        False
        >>> CacheEntry(value=1, written_at=0.0, expires_at=5.0).is_expired(6.0)
        True
    """

    value: Any
    written_at: float
    expires_at: Optional[float]

    def is_expired(self, now: float) -> bool:
        """Check whether this entry has expired.

        Args:
            now: Current timestamp.

        Returns:
            bool: True when the entry carries an expiry in the past.
        """
        return self.expires_at is not None and now > self.expires_at


class GenerationCache:
    """
    Bounded LRU cache of generated values with optional TTL.

    Stored and returned values are deep copies, so callers that mutate a
    generated record (for example by assigning an identifier) never alter
    the cached value.

    Attributes:
        max_size: Maximum number of entries
        ttl: Time-to-live in seconds, 0 or None disables expiry
        _cache: Cache storage, least recently used first
        _lock: Threading lock for thread safety

    Examples:
        >>> cache = GenerationCache(max_size=3)
        >>> cache.set("k", {"name": "Ann"})
        >>> cache.has("k")
        True
        >>> value = cache.get("k")
        >>> value["name"] = "Bob"
        >>> cache.get("k")
        {'name': 'Ann'}
        >>> cache.stats()["size"], cache.stats()["capacity"]
        (1, 3)
    """

    def __init__(self, max_size: int = 500, ttl: Optional[float] = 3600):
        """Initialize cache.

        Args:
            max_size: Maximum number of entries
            ttl: Time-to-live in seconds, 0 or None disables expiry

        Raises:
            ConfigurationError: If ``max_size`` is below 1 or ``ttl`` is negative.
        """
        if not isinstance(max_size, int) or max_size < 1:
            raise ConfigurationError("Cache size must be a positive integer", {"field": "cache_max_size", "value": max_size})
        if ttl is not None and ttl < 0:
            raise ConfigurationError("Cache TTL cannot be negative", {"field": "cache_ttl", "value": ttl})
        self.max_size = max_size
        self.ttl = ttl or None
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            A copy of the cached value, or None if not found/expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(time.time()):
                del self._cache[key]
                self._misses += 1
                return None

            self._cache.move_to_end(key)
            self._hits += 1
            return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any) -> None:
        """
        Set value in cache, evicting the least recently used entry when full.

        Args:
            key: Cache key
            value: Value to cache
        """
        now = time.time()
        expires_at = now + self.ttl if self.ttl else None
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted least recently used generation result {evicted[:12]}")

            self._cache[key] = CacheEntry(value=copy.deepcopy(value), written_at=now, expires_at=expires_at)

    def has(self, key: str) -> bool:
        """
        Check whether a live entry exists without touching its recency.

        Args:
            key: Cache key

        Returns:
            bool: True if the key is cached and not expired

        Examples:
            >>> cache = GenerationCache()
            >>> cache.has("missing")
            False
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            if entry.is_expired(time.time()):
                del self._cache[key]
                return False
            return True

    def delete(self, key: str) -> None:
        """
        Delete value from cache.

        Args:
            key: Cache key to delete
        """
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        """
        Clear all cached entries, e.g. after a schema reload.

        Examples:
            >>> cache = GenerationCache()
            >>> cache.set('a', 1)
            >>> cache.clear()
            >>> len(cache)
            0
        """
        with self._lock:
            size = len(self._cache)
            self._cache.clear()
        if size:
            logger.debug(f"Cleared {size} cached generation results")

    def purge_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            int: Number of removed entries
        """
        now = time.time()
        with self._lock:
            expired = [key for key, entry in self._cache.items() if entry.is_expired(now)]
            for key in expired:
                del self._cache[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired generation results")
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with size, capacity, ttl and hit/miss counters
        """
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._cache),
                "capacity": self.max_size,
                "ttl": self.ttl,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / total if total else 0.0,
            }

    def __len__(self) -> int:
        """
        Get the number of entries in cache.

        Returns:
            int: Number of entries in cache
        """
        with self._lock:
            return len(self._cache)
