"""Search result page -> CatalogEntry list.

Search pages are not structured the same way across themes, so this tries
generic content-block selectors first and falls back to any ``/watch``
link with a meaningful label.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from streamscout.domain.entities.stream import CatalogEntry

from .html import attr_str, first_text, parse_html, resolve_url

_BLOCK_SELECTOR = "article, .post, .movie, .item, .result"
_TITLE_SELECTOR = "h2, h3, .title"
_MIN_LINK_TEXT = 3


def make_entry_id(href: str, *, provider_id: str, base_url: str) -> str:
    """``<provider>:<path>`` with the site origin and one leading slash removed."""
    path = href.replace(base_url, "", 1)
    if path.startswith("/"):
        path = path[1:]
    return f"{provider_id}:{path}"


def _entry(href: str, name: str, provider_id: str, base_url: str) -> CatalogEntry:
    return CatalogEntry(
        id=make_entry_id(href, provider_id=provider_id, base_url=base_url),
        name=name,
        url=resolve_url(href, base_url),
    )


def _from_blocks(
    soup: BeautifulSoup, provider_id: str, base_url: str
) -> list[CatalogEntry]:
    entries: list[CatalogEntry] = []
    for block in soup.select(_BLOCK_SELECTOR):
        link = block.select_one("a[href]")
        if link is None:
            continue
        href = attr_str(link, "href")
        title = first_text(block, _TITLE_SELECTOR) or link.get_text().strip()
        if href and title:
            entries.append(_entry(href, title, provider_id, base_url))
    return entries


def _from_watch_links(
    soup: BeautifulSoup, provider_id: str, base_url: str
) -> list[CatalogEntry]:
    entries: list[CatalogEntry] = []
    for link in soup.select("a[href]"):
        href = attr_str(link, "href")
        text = link.get_text().strip()
        if href and len(text) > _MIN_LINK_TEXT and "/watch" in href:
            entries.append(_entry(href, text, provider_id, base_url))
    return entries


def parse_catalog_entries(
    html: str | None, *, provider_id: str, base_url: str
) -> list[CatalogEntry]:
    """Extract title/link pairs from a search result page."""
    soup = parse_html(html)
    return _from_blocks(soup, provider_id, base_url) or _from_watch_links(
        soup, provider_id, base_url
    )
