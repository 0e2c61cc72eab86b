"""One-level iframe following.

Player pages commonly embed the real player in an ``<iframe>``.  The
follower fetches each iframe (with the embedding page as Referer) and runs
the extractor over the embedded document.
"""

from __future__ import annotations

import structlog

from streamscout.domain.exceptions import FetchError
from streamscout.domain.ports.fetcher import PageFetcherPort

from .extractor import extract_stream_urls
from .html import iframe_sources, parse_html, resolve_url

log = structlog.get_logger(__name__)


class IframeFollower:
    """Follows iframes found on a page, one level deep, sequentially."""

    def __init__(self, fetcher: PageFetcherPort, *, base_url: str) -> None:
        self._fetcher = fetcher
        self._base_url = base_url

    async def follow(self, page_url: str, html: str) -> list[str]:
        """Return stream URLs found inside the iframes of *html*.

        Results are concatenated per iframe, not deduplicated.  A failing
        iframe is logged and skipped.
        """
        iframe_urls = [
            resolve_url(src, page_url) for src in iframe_sources(parse_html(html))
        ]

        results: list[str] = []
        for iframe_url in iframe_urls:
            log.debug("iframe_following", page=page_url, iframe=iframe_url)
            try:
                inner = await self._fetcher.fetch_html(
                    iframe_url, headers={"Referer": page_url}
                )
            except FetchError as exc:
                log.info("iframe_fetch_failed", iframe=iframe_url, reason=exc.reason)
                continue
            results.extend(
                extract_stream_urls(inner, iframe_url, base_url=self._base_url)
            )
        return results
