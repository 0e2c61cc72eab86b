"""Heuristic stream URL extraction from arbitrary HTML.

Five independent passes over one parsed document:

1. ``<video>`` / ``<video><source>`` ``src`` (or ``data-src``)
2. ``<a href>`` ending in a media extension (query string ignored)
3. ``<a href>`` whose text mentions play/stream/download
4. ``<iframe src>``
5. ``http(s)://...`` media URLs inside inline ``<script>`` text

Pass 3 is high-recall and will happily return non-media links.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from .html import attr_str, iframe_sources, parse_html, resolve_url

_MEDIA_HREF_RE = re.compile(r"\.(m3u8|mp4|mkv|mpd|webm)(\?.*)?$", re.IGNORECASE)
_SCRIPT_URL_RE = re.compile(
    r"""(https?://[^\s'"]+\.(m3u8|mp4|mkv|mpd)(\?[^\s'"]*)?)""",
    re.IGNORECASE,
)
_LINK_TEXT_KEYWORDS = ("play", "stream", "download")


def _video_sources(soup: BeautifulSoup) -> list[str]:
    found: list[str] = []
    for el in soup.select("video, video source"):
        src = attr_str(el, "src") or attr_str(el, "data-src")
        if src:
            found.append(src)
    return found


def _anchor_links(soup: BeautifulSoup) -> list[str]:
    found: list[str] = []
    for el in soup.select("a[href]"):
        href = attr_str(el, "href")
        if not href:
            continue
        if _MEDIA_HREF_RE.search(href):
            found.append(href)
        text = el.get_text().lower()
        if any(word in text for word in _LINK_TEXT_KEYWORDS):
            found.append(href)
    return found


def _script_urls(soup: BeautifulSoup) -> list[str]:
    found: list[str] = []
    for script in soup.find_all("script"):
        text = script.string
        if not text:
            continue
        found.extend(m.group(1) for m in _SCRIPT_URL_RE.finditer(text))
    return found


def extract_stream_urls(
    html: str | bytes | None,
    page_url: str | None = None,
    *,
    base_url: str,
) -> set[str]:
    """Return every candidate stream URL in *html* as an absolute URL.

    Relative URLs resolve against *page_url*, or *base_url* when the page
    URL is unknown.  Malformed HTML yields whatever the parser recovered,
    possibly nothing; this function does not raise for bad markup.
    """
    soup = parse_html(html)
    base = page_url or base_url

    relative = [
        *_video_sources(soup),
        *_anchor_links(soup),
        *iframe_sources(soup),
    ]
    found = {resolve_url(u, base) for u in relative}
    # Script matches are absolute by construction.
    found.update(_script_urls(soup))
    return found
