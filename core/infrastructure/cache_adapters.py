"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort. The backend
(local memory, Redis, etc.) comes from the ``CACHES`` setting.
"""

import logging
import re
import threading
from typing import Any, Dict, List, Optional, Pattern, Set

from asgiref.sync import sync_to_async
from django.core.cache import caches
from django.core.cache.backends.base import DEFAULT_TIMEOUT, BaseCache

from core.infrastructure.cache import CachePort
from core.metrics import cache_hits_total, cache_misses_total

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYS = 10000
DEFAULT_SCAN_WARNING_THRESHOLD = 10000


def compile_glob(pattern: str) -> Pattern:
    """
    Compile a cache glob into an anchored regular expression.

    Only ``*`` is special; everything else matches literally.
    """
    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile("^" + ".*".join(parts) + "$")


def _namespace(key: str) -> str:
    """Metric label for a key: its prefix up to the first colon."""
    return key.split(":", 1)[0]


# Keys written per cache alias, shared by every adapter on that alias.
_key_indexes: Dict[str, Set[str]] = {}
_key_indexes_lock = threading.Lock()


def _key_index(alias: str) -> Set[str]:
    with _key_indexes_lock:
        return _key_indexes.setdefault(alias, set())


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    TTL and the entry ceiling are enforced by the configured backend
    (``TIMEOUT`` and ``OPTIONS["MAX_ENTRIES"]``). Django caches have no key
    listing, so adapters keep an index of written keys for
    ``delete_by_pattern``, shared by every adapter on the same alias; the
    index is pruned against the backend once it grows past ``max_keys``.
    """

    def __init__(
        self,
        alias: str = "default",
        backend: Optional[BaseCache] = None,
        max_keys: int = DEFAULT_MAX_KEYS,
        scan_warning_threshold: int = DEFAULT_SCAN_WARNING_THRESHOLD,
    ):
        """
        Initialize the adapter.

        Args:
            alias: Name of the ``CACHES`` entry to use
            backend: Explicit backend instance, overriding ``alias``
            max_keys: Index size above which stale keys are pruned
            scan_warning_threshold: Key count above which pattern scans log a warning
        """
        self.alias = alias
        self._backend = backend
        self.max_keys = max_keys
        self.scan_warning_threshold = scan_warning_threshold
        self._patterns: Dict[str, Pattern] = {}
        if backend is not None:
            self._keys: Set[str] = set()
            self._lock = threading.Lock()
        else:
            self._keys = _key_index(alias)
            self._lock = _key_indexes_lock

    @property
    def backend(self) -> BaseCache:
        return self._backend if self._backend is not None else caches[self.alias]

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        try:
            value = await sync_to_async(self.backend.get)(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            return None

        if value is None:
            cache_misses_total.labels(namespace=_namespace(key)).inc()
            logger.debug("Cache miss: %s", key)
        else:
            cache_hits_total.labels(namespace=_namespace(key)).inc()
            logger.debug("Cache hit: %s", key)
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (backend ``TIMEOUT`` when None)
        """
        backend_timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        try:
            await sync_to_async(self.backend.set)(key, value, timeout=backend_timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)
            return

        with self._lock:
            self._keys.add(key)
            oversized = len(self._keys) > self.max_keys
        if oversized:
            await sync_to_async(self._prune_index)()
        logger.debug("Cache set: %s (timeout=%s)", key, timeout)

    def _prune_index(self) -> None:
        """Forget indexed keys the backend has already expired or culled."""
        with self._lock:
            keys = list(self._keys)
        live = set(self.backend.get_many(keys))
        with self._lock:
            self._keys.difference_update(set(keys) - live)
        logger.debug("Cache index pruned to %s keys", len(live))

    async def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key
        """
        try:
            await sync_to_async(self.backend.delete)(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", e, exc_info=True)
            return
        with self._lock:
            self._keys.discard(key)
        logger.debug("Cache delete: %s", key)

    async def delete_by_pattern(self, pattern: str) -> int:
        """
        Delete every entry whose key matches a glob pattern.

        Args:
            pattern: Glob where ``*`` matches any run of characters

        Returns:
            Number of index entries removed
        """
        regex = self._patterns.get(pattern)
        if regex is None:
            regex = compile_glob(pattern)
            self._patterns[pattern] = regex

        with self._lock:
            key_count = len(self._keys)
            matched: List[str] = [key for key in self._keys if regex.match(key)]

        if key_count > self.scan_warning_threshold:
            logger.warning(
                "Pattern delete scanned %s keys; consider a cache server with native prefix scans",
                key_count,
            )
        if not matched:
            return 0

        try:
            await sync_to_async(self.backend.delete_many)(matched)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting pattern %s from cache: %s", pattern, e, exc_info=True)
            return 0

        with self._lock:
            self._keys.difference_update(matched)
        logger.debug("Cache delete pattern: %s (%s removed)", pattern, len(matched))
        return len(matched)

    async def flush(self) -> None:
        """Remove every entry."""
        try:
            await sync_to_async(self.backend.clear)()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error clearing cache: %s", e, exc_info=True)
            return
        with self._lock:
            self._keys.clear()
        logger.debug("Cache flushed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)


# Global cache instance
cache_adapter = DjangoCacheAdapter()


def configure_cache_adapter(adapter: DjangoCacheAdapter = cache_adapter) -> DjangoCacheAdapter:
    """Apply the ``LICENSE_CACHE_*`` settings to an adapter."""
    from django.conf import settings

    adapter.max_keys = getattr(settings, "LICENSE_CACHE_MAX_KEYS", DEFAULT_MAX_KEYS)
    adapter.scan_warning_threshold = getattr(
        settings, "LICENSE_CACHE_SCAN_WARNING_THRESHOLD", DEFAULT_SCAN_WARNING_THRESHOLD
    )
    return adapter
