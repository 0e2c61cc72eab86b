"""Port for player JSON/XHR endpoint probing."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class JsonProbePort(Protocol):
    """Looks for stream URLs exposed through a player's JSON config.

    Called once per candidate page after HTML extraction.  The default
    implementation finds nothing.
    """

    @property
    def name(self) -> str: ...

    async def probe(self, html: str, page_url: str) -> list[str]:
        """Return absolute stream URLs found for *page_url*."""
        ...
