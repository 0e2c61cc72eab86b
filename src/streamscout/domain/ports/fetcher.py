"""Port for fetching (and caching) remote pages."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal, Protocol, runtime_checkable

ResponseType = Literal["text", "binary"]


@runtime_checkable
class PageFetcherPort(Protocol):
    """Fetches pages from the origin site.

    Implementations raise ``FetchError`` on any failure and never cache
    a failed response.
    """

    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        response_type: ResponseType = "text",
    ) -> str | bytes:
        """Fetch *url* and return the raw body."""
        ...

    async def fetch_html(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        """Fetch *url* as an HTML document."""
        ...
