"""Diskcache adapter - SQLite-based page cache that survives restarts."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)


class DiskcacheAdapter:
    """Async wrapper for diskcache.Cache (sync-only library).

    - Uses `asyncio.to_thread` for I/O (no blocking of the event loop).
    - Semaphore limits parallel disk operations (SQLite lock contention).
    - Opens lazily on first use; ``async with`` is optional.

    Args:
        directory: SQLite DB path.
        ttl_seconds: Default TTL for `set()` without explicit value.
        max_concurrent: Max parallel disk ops.
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/streamscout",
        ttl_seconds: int = 300,
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._open_lock = asyncio.Lock()

    async def _open(self) -> DiskCache:
        if self._cache is not None:
            return self._cache
        async with self._open_lock:
            if self._cache is None:
                self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
                log.info("diskcache_opened", path=str(self.directory))
        return self._cache

    async def __aenter__(self) -> DiskcacheAdapter:
        await self._open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.info("diskcache_closed", directory=str(self.directory))

    async def get(self, key: str) -> Optional[Any]:
        cache = await self._open()
        async with self._semaphore:
            # diskcache checks expiry on read
            value = await asyncio.to_thread(cache.get, key, default=None)
            log.debug("cache_get", key=key, hit=value is not None)
            return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        cache = await self._open()
        expire_time = ttl if ttl is not None else self.default_ttl
        async with self._semaphore:
            await asyncio.to_thread(cache.set, key, value, expire=expire_time)
            log.debug("cache_set", key=key, ttl=expire_time)

    async def delete(self, key: str) -> bool:
        if self._cache is None:
            return False
        async with self._semaphore:
            deleted = await asyncio.to_thread(self._cache.delete, key)
            log.debug("cache_delete", key=key, deleted=deleted)
            return bool(deleted)

    async def exists(self, key: str) -> bool:
        if self._cache is None:
            return False
        async with self._semaphore:
            return await asyncio.to_thread(lambda: key in self._cache)

    async def clear(self) -> None:
        if self._cache is None:
            return
        async with self._semaphore:
            await asyncio.to_thread(self._cache.clear)
            log.warning("cache_cleared", directory=str(self.directory))

