"""HTTP fetch wrapper with a short-TTL response cache.

Every GET goes out with a browser-like User-Agent and a Referer that
defaults to the site origin.  Successful bodies are cached under
``html:<url>`` (documents) or ``raw:<type>:<url>`` (anything else) for the
cache's TTL; failures raise ``FetchError`` and leave the cache untouched.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx
import structlog

from streamscout.domain.exceptions import FetchError
from streamscout.domain.ports.cache import CachePort
from streamscout.domain.ports.fetcher import ResponseType

log = structlog.get_logger(__name__)

_HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def cache_key(kind: str, url: str, response_type: ResponseType | None = None) -> str:
    """Build the cache key for a request kind, URL and optional body type."""
    if response_type is None:
        return f"{kind}:{url}"
    return f"{kind}:{response_type}:{url}"


class CachedFetcher:
    """Fetches pages via httpx, caching bodies in a ``CachePort``.

    The httpx client is created lazily and must be closed via ``aclose()``
    (or ``async with``).  A client may be injected for tests; an injected
    client is not closed by this class.
    """

    def __init__(
        self,
        cache: CachePort,
        *,
        base_url: str,
        user_agent: str,
        timeout: float = 15.0,
        max_redirects: int = 5,
        ttl_seconds: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._cache = cache
        self.base_url = base_url
        self._user_agent = user_agent
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._ttl = ttl_seconds
        self._client = client
        self._owns_client = client is None

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                max_redirects=self._max_redirects,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> CachedFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_html(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        merged = {"Accept": _HTML_ACCEPT, **(headers or {})}
        body = await self._cached_get(
            cache_key("html", url), url, merged, timeout, "text"
        )
        return body if isinstance(body, str) else body.decode("utf-8", "replace")

    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        response_type: ResponseType = "text",
    ) -> str | bytes:
        return await self._cached_get(
            cache_key("raw", url, response_type),
            url,
            dict(headers or {}),
            timeout,
            response_type,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_headers(self, overrides: Mapping[str, str]) -> dict[str, str]:
        headers = {"User-Agent": self._user_agent, "Referer": self.base_url}
        headers.update(overrides)
        return headers

    async def _cached_get(
        self,
        key: str,
        url: str,
        headers: Mapping[str, str],
        timeout: float | None,
        response_type: ResponseType,
    ) -> str | bytes:
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        body = await self._get(url, headers, timeout, response_type)
        await self._cache.set(key, body, ttl=self._ttl)
        return body

    async def _get(
        self,
        url: str,
        headers: Mapping[str, str],
        timeout: float | None,
        response_type: ResponseType,
    ) -> str | bytes:
        client = self._ensure_client()
        try:
            resp = await client.get(
                url,
                headers=self._build_headers(headers),
                timeout=timeout if timeout is not None else self._timeout,
            )
        except httpx.TimeoutException as exc:
            log.debug("fetch_timeout", url=url)
            raise FetchError(url, "timeout") from exc
        except httpx.TooManyRedirects as exc:
            log.debug("fetch_too_many_redirects", url=url)
            raise FetchError(url, "too many redirects") from exc
        except httpx.InvalidURL as exc:
            log.debug("fetch_invalid_url", url=url, error=str(exc))
            raise FetchError(url, f"invalid url: {exc}") from exc
        except httpx.HTTPError as exc:
            log.debug("fetch_transport_error", url=url, error=str(exc))
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        if not 200 <= resp.status_code < 400:
            log.debug("fetch_http_error", url=url, status=resp.status_code)
            raise FetchError(url, f"HTTP {resp.status_code}", resp.status_code)

        log.debug("fetch_ok", url=url, status=resp.status_code, final_url=str(resp.url))
        return resp.content if response_type == "binary" else resp.text
