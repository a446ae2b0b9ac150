# core/cache.py
"""
Caching utilities
"""
from typing import Any, Optional

from cachetools import TTLCache


class CacheManager:
    """Simple in-memory cache manager"""

    def __init__(self, max_size: int = 1000, ttl: int = 900):
        self.ttl = ttl
        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl)

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        return self._cache.get(key)

    async def set(self, key: str, value: Any) -> None:
        """Set value in cache; entries expire after the manager's TTL"""
        self._cache[key] = value

    async def delete(self, key: str) -> None:
        """Delete value from cache"""
        self._cache.pop(key, None)

    async def clear(self) -> None:
        """Clear all cache"""
        self._cache.clear()
