"""
Cache abstraction (port).

This module defines the cache interface that can be implemented
with different backends (in-process memory, Redis, etc.).
"""
from abc import ABC, abstractmethod
from typing import Any, Optional


class CachePort(ABC):
    """
    Abstract cache port.

    This defines the interface for caching operations.
    Implementations can use an in-process dictionary or a shared server.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (None for the adapter default)
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key
        """
        pass

    @abstractmethod
    async def delete_by_pattern(self, pattern: str) -> int:
        """
        Delete every entry whose key matches a glob pattern.

        Args:
            pattern: Glob where ``*`` matches any run of characters

        Returns:
            Number of entries removed
        """
        pass

    @abstractmethod
    async def flush(self) -> None:
        """Remove every entry."""
        pass
