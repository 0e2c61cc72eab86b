"""Cache factory - builds the adapter selected in config."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from streamscout.domain.ports.cache import CachePort
from streamscout.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from streamscout.infrastructure.cache.memory_adapter import MemoryCacheAdapter

log = structlog.get_logger(__name__)

CacheBackend = Literal["memory", "diskcache"]


def create_cache(
    backend: CacheBackend = "memory",
    *,
    ttl_seconds: int = 300,
    check_period_seconds: int = 120,
    directory: str | Path = "./.cache/streamscout",
    max_concurrent: int = 10,
) -> CachePort:
    """Create a cache adapter for *backend*.

    Args:
        backend: "memory" (in-process) or "diskcache" (SQLite).
        ttl_seconds: Default TTL for both backends.
        check_period_seconds: Expiry sweep interval (memory only).
        directory: Diskcache path.
        max_concurrent: Semaphore limit (diskcache only).

    Raises:
        ValueError: If `backend` is unknown.
    """
    if backend == "memory":
        log.debug("cache_factory_create", backend=backend, ttl=ttl_seconds)
        return MemoryCacheAdapter(
            ttl_seconds=ttl_seconds,
            check_period_seconds=check_period_seconds,
        )
    elif backend == "diskcache":
        log.debug(
            "cache_factory_create",
            backend=backend,
            directory=str(directory),
            ttl=ttl_seconds,
        )
        return DiskcacheAdapter(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_concurrent=max_concurrent,
        )
    else:
        raise ValueError(
            f"Unknown cache backend: {backend!r}. Must be 'memory' or 'diskcache'."
        )
