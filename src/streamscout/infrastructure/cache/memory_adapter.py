"""In-process TTL cache (default backend)."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import structlog

log = structlog.get_logger(__name__)


class MemoryCacheAdapter:
    """Dict-backed cache with per-entry expiry.

    - Expired entries are never returned, whether or not a purge ran.
    - A sweep of all expired entries runs lazily at most once every
      *check_period_seconds* (triggered by ``get``/``set``).
    - Writes are plain replacements, so concurrent coroutines sharing one
      instance need no locking.

    Args:
        ttl_seconds: Default TTL for ``set()`` without explicit value.
        check_period_seconds: Minimum interval between expiry sweeps.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: int = 300,
        check_period_seconds: int = 120,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = ttl_seconds
        self.check_period = check_period_seconds
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}
        self._last_sweep = clock()

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.check_period:
            return
        self._last_sweep = now
        expired = [k for k, (exp, _) in self._store.items() if exp <= now]
        for key in expired:
            self._store.pop(key, None)
        if expired:
            log.debug("cache_swept", evicted=len(expired), remaining=len(self._store))

    async def get(self, key: str) -> Any | None:
        now = self._clock()
        self._maybe_sweep(now)
        entry = self._store.get(key)
        if entry is None:
            log.debug("cache_get", key=key, hit=False)
            return None
        expires_at, value = entry
        if expires_at <= now:
            self._store.pop(key, None)
            log.debug("cache_get", key=key, hit=False, expired=True)
            return None
        log.debug("cache_get", key=key, hit=True)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        now = self._clock()
        self._maybe_sweep(now)
        expire_time = ttl if ttl is not None else self.default_ttl
        self._store[key] = (now + expire_time, value)
        log.debug("cache_set", key=key, ttl=expire_time)

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        entry = self._store.get(key)
        return entry is not None and entry[0] > self._clock()

    async def clear(self) -> None:
        self._store.clear()
        log.warning("cache_cleared", backend="memory")
