"""Catalog search use case (best effort)."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from streamscout.domain.entities.stream import CatalogEntry
from streamscout.domain.exceptions import FetchError
from streamscout.domain.ports.fetcher import PageFetcherPort

from .resolve_streams import search_page_url

log = structlog.get_logger(__name__)

_ParseFn = Callable[..., list[CatalogEntry]]


class CatalogSearchUseCase:
    """Queries the site's search page and returns catalog entries."""

    def __init__(
        self,
        *,
        fetcher: PageFetcherPort,
        parse: _ParseFn,
        provider_id: str,
        base_url: str,
    ) -> None:
        self._fetcher = fetcher
        self._parse = parse
        self._provider_id = provider_id
        self._base_url = base_url

    async def execute(self, query: str | None) -> list[CatalogEntry]:
        q = (query or "").strip()
        if not q:
            return []

        url = search_page_url(self._base_url, q)
        try:
            html = await self._fetcher.fetch_html(url)
            entries = self._parse(
                html, provider_id=self._provider_id, base_url=self._base_url
            )
        except FetchError as exc:
            log.info("search_failed", query=q, url=url, reason=exc.reason)
            return []
        except Exception as exc:  # noqa: BLE001
            log.warning("search_parse_failed", query=q, url=url, error=str(exc))
            return []

        log.debug("search_done", query=q, count=len(entries))
        return entries
