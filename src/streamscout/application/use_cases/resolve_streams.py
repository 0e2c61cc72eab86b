"""Stream resolution use case.

identifier -> candidate page URLs -> fetch + extract (+ iframes, + JSON
probe) per candidate, first hit wins -> search-page fallback ->
StreamDescriptor list.

Each step yields a ``StepOutcome``; the steps are folded in order.  The
only raised condition (missing identifier) is caught in ``execute``, so
callers always get a list.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol
from urllib.parse import quote

import structlog

from streamscout.domain.entities.outcome import StepOutcome
from streamscout.domain.entities.stream import StreamDescriptor, StreamRequest
from streamscout.domain.exceptions import FetchError, MissingIdentifierError
from streamscout.domain.ports.fetcher import PageFetcherPort
from streamscout.domain.ports.json_probe import JsonProbePort

log = structlog.get_logger(__name__)

# Characters encodeURIComponent leaves alone (besides alphanumerics and -_.)
_COMPONENT_SAFE = "!~*'()"


class _IframeFollower(Protocol):
    async def follow(self, page_url: str, html: str) -> list[str]: ...


_ExtractFn = Callable[..., set[str]]
_NormalizeFn = Callable[..., StreamDescriptor]


def quote_component(value: str) -> str:
    """Percent-encode *value* like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe=_COMPONENT_SAFE)


def normalize_identifier(raw: str, provider_id: str) -> str:
    """Strip an optional ``<provider_id>:`` prefix and any leading slashes."""
    ident = re.sub(rf"^{re.escape(provider_id)}:", "", raw)
    return ident.lstrip("/")


def search_page_url(base_url: str, term: str) -> str:
    return f"{base_url}/?s={quote_component(term)}"


def build_candidate_urls(base_url: str, ident: str) -> list[str]:
    """Candidate pages in trial order: watch, movie, bare, search, player."""
    return [
        f"{base_url}/watch/{ident}",
        f"{base_url}/movie/{ident}",
        f"{base_url}/{ident}",
        search_page_url(base_url, ident),
        f"{base_url}/player.php?id={quote_component(ident)}",
    ]


def dedupe_urls(urls: Iterable[str]) -> list[str]:
    """Drop falsy values and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(u for u in urls if u))


class StreamResolveUseCase:
    """Resolves a host identifier to playable stream descriptors."""

    def __init__(
        self,
        *,
        fetcher: PageFetcherPort,
        iframe_follower: _IframeFollower,
        json_probe: JsonProbePort,
        extract: _ExtractFn,
        normalize: _NormalizeFn,
        provider_id: str,
        base_url: str,
        title_prefix: str,
    ) -> None:
        self._fetcher = fetcher
        self._iframes = iframe_follower
        self._json_probe = json_probe
        self._extract = extract
        self._normalize = normalize
        self._provider_id = provider_id
        self._base_url = base_url
        self._title_prefix = title_prefix

    async def execute(
        self, args: Mapping[str, Any] | str | None
    ) -> list[StreamDescriptor]:
        """Resolve *args* (``{"id": ...}`` / ``{"query": ...}`` / raw id)."""
        try:
            ident = self._identifier(StreamRequest.from_args(args))
        except MissingIdentifierError as exc:
            log.info("resolve_rejected", reason=str(exc))
            return []

        outcome = await self._first_hit(build_candidate_urls(self._base_url, ident))
        if not outcome.ok:
            outcome = await self._search_fallback(ident)

        if not outcome.ok:
            log.info("resolve_no_streams", ident=ident)
            return []

        log.info(
            "resolve_found",
            ident=ident,
            source=outcome.source,
            count=len(outcome.urls),
        )
        return [self._normalize(u, title_prefix=self._title_prefix) for u in outcome.urls]

    def _identifier(self, request: StreamRequest) -> str:
        if not request.raw_id:
            raise MissingIdentifierError("no id/query provided")
        ident = normalize_identifier(request.raw_id, self._provider_id)
        if not ident:
            raise MissingIdentifierError(f"empty identifier in {request.raw_id!r}")
        return ident

    async def _first_hit(self, candidates: list[str]) -> StepOutcome:
        """Try *candidates* in order; return the first ``found`` outcome."""
        last = StepOutcome.empty(self._base_url)
        for page_url in candidates:
            log.debug("candidate_trying", url=page_url)
            last = await self._try_candidate(page_url)
            if last.ok:
                return last
            if last.status == "failed":
                log.info("candidate_fetch_failed", url=page_url, reason=last.reason)
        return last

    async def _try_candidate(self, page_url: str) -> StepOutcome:
        try:
            html = await self._fetcher.fetch_html(page_url)
        except FetchError as exc:
            return StepOutcome.failed(page_url, exc.reason)

        urls = list(self._extract(html, page_url, base_url=self._base_url))
        if not urls:
            urls.extend(await self._iframes.follow(page_url, html))
        urls.extend(await self._probe_json(html, page_url))

        unique = dedupe_urls(urls)
        return StepOutcome.found(page_url, unique) if unique else StepOutcome.empty(page_url)

    async def _probe_json(self, html: str, page_url: str) -> list[str]:
        try:
            return await self._json_probe.probe(html, page_url)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "json_probe_failed",
                probe=self._json_probe.name,
                url=page_url,
                error=str(exc),
            )
            return []

    async def _search_fallback(self, ident: str) -> StepOutcome:
        url = search_page_url(self._base_url, ident)
        try:
            html = await self._fetcher.fetch_html(url)
        except FetchError as exc:
            log.info("search_fallback_failed", url=url, reason=exc.reason)
            return StepOutcome.failed(url, exc.reason)

        unique = dedupe_urls(self._extract(html, url, base_url=self._base_url))
        return StepOutcome.found(url, unique) if unique else StepOutcome.empty(url)
