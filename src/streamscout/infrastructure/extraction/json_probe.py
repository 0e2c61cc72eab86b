"""Player JSON probes (``JsonProbePort`` implementations).

``NullJsonProbe`` is the default and finds nothing.  ``PlayerConfigJsonProbe``
reads JWPlayer-style configs embedded in the page, e.g.::

    var playerOptions = {"sources": [{"file": "/hls/master.m3u8"}]};
    jwplayer("player").setup({sources: [{file: "https://cdn/x.mp4"}]});
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

from .html import resolve_url

log = structlog.get_logger(__name__)

_PLAYER_OPTIONS_RE = re.compile(
    r"playerOptions\s*=\s*(\{.*?\})\s*;", re.DOTALL | re.IGNORECASE
)
_SOURCES_FILE_RE = re.compile(
    r"""sources\s*:\s*\[\s*\{[^}]*?file\s*:\s*["']([^"']+)["']""",
    re.IGNORECASE,
)


class NullJsonProbe:
    """Reserved extension point: no site-specific JSON endpoint is known."""

    @property
    def name(self) -> str:
        return "none"

    async def probe(self, html: str, page_url: str) -> list[str]:
        return []


def _collect_files(node: Any, out: list[str]) -> None:
    """Walk a decoded player config and collect every ``file``/``src`` value."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key in ("file", "src") and isinstance(value, str) and value:
                out.append(value)
            else:
                _collect_files(value, out)
    elif isinstance(node, list):
        for item in node:
            _collect_files(item, out)


class PlayerConfigJsonProbe:
    """Extracts stream URLs from inline player configuration objects."""

    @property
    def name(self) -> str:
        return "player_config"

    async def probe(self, html: str, page_url: str) -> list[str]:
        if not html:
            return []

        files: list[str] = []
        for m in _PLAYER_OPTIONS_RE.finditer(html):
            try:
                _collect_files(json.loads(m.group(1)), files)
            except (json.JSONDecodeError, ValueError):
                log.debug("player_options_not_json", page=page_url)

        files.extend(m.group(1) for m in _SOURCES_FILE_RE.finditer(html))

        # Order-preserving dedupe
        return list(dict.fromkeys(resolve_url(f, page_url) for f in files))


def create_json_probe(kind: str) -> NullJsonProbe | PlayerConfigJsonProbe:
    """Build the probe named in config (``none`` / ``player_config``)."""
    if kind == "none":
        return NullJsonProbe()
    if kind == "player_config":
        return PlayerConfigJsonProbe()
    raise ValueError(
        f"Unknown json probe: {kind!r}. Must be 'none' or 'player_config'."
    )
