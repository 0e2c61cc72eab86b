"""Host-facing provider object.

Hosts (Stremio/Nuvio-style addons) call ``get_streams_for_id`` and
``search`` and expect plain lists back.  Nothing raised inside the
provider crosses this boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from streamscout.application.use_cases.resolve_streams import StreamResolveUseCase
from streamscout.application.use_cases.search_catalog import CatalogSearchUseCase
from streamscout.domain.entities.stream import CatalogEntry, StreamDescriptor
from streamscout.domain.ports.cache import CachePort
from streamscout.infrastructure.http.fetch_cache import CachedFetcher

log = structlog.get_logger(__name__)


class Provider:
    """A single-site stream provider."""

    def __init__(
        self,
        *,
        id: str,
        name: str,
        enabled: bool,
        resolve: StreamResolveUseCase,
        search: CatalogSearchUseCase,
        fetcher: CachedFetcher,
        cache: CachePort,
    ) -> None:
        self.id = id
        self.name = name
        self.enabled = enabled
        self._resolve = resolve
        self._search = search
        self._fetcher = fetcher
        self._cache = cache

    def __repr__(self) -> str:
        return f"Provider(id={self.id!r}, enabled={self.enabled})"

    async def __aenter__(self) -> Provider:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._fetcher.aclose()
        await self._cache.aclose()

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    async def get_streams(
        self, args: Mapping[str, Any] | str | None = None
    ) -> list[StreamDescriptor]:
        try:
            return await self._resolve.execute(args)
        except Exception as exc:  # noqa: BLE001
            log.error("get_streams_error", provider=self.id, error=str(exc))
            return []

    async def get_streams_for_id(
        self, args: Mapping[str, Any] | str | None = None
    ) -> list[dict[str, Any]]:
        """Resolve streams and return them in the host's dict shape."""
        return [s.to_dict() for s in await self.get_streams(args)]

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def search_entries(self, query: str | None) -> list[CatalogEntry]:
        try:
            return await self._search.execute(query)
        except Exception as exc:  # noqa: BLE001
            log.error("search_error", provider=self.id, error=str(exc))
            return []

    async def search(self, query: str | None) -> list[dict[str, str]]:
        """Search the site and return catalog entries as dicts."""
        return [e.to_dict() for e in await self.search_entries(query)]
