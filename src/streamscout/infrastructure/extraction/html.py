"""BeautifulSoup helpers shared by the extraction modules.

Pages come from arbitrary, frequently broken sites.  Parsing never raises:
anything that cannot be parsed becomes an empty document.
"""

from __future__ import annotations

from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup, Tag

log = structlog.get_logger(__name__)


def parse_html(html: str | bytes | None) -> BeautifulSoup:
    """Parse an HTML string (or bytes) into a BeautifulSoup tree.

    Uses the ``lxml`` parser.  Returns an empty tree for empty input or
    when the parser gives up.
    """
    if not html:
        return BeautifulSoup("", "lxml")
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as exc:  # noqa: BLE001
        log.debug("html_parse_failed", error=str(exc))
        return BeautifulSoup("", "lxml")


def resolve_url(url: str, base: str) -> str:
    """Resolve *url* against *base*; return *url* unchanged on failure."""
    try:
        return urljoin(base, url)
    except ValueError:
        return url


def attr_str(tag: Tag, name: str) -> str:
    """Read an attribute as a stripped string ('' when missing)."""
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return str(value).strip() if value else ""


def first_text(root: Tag, selector: str) -> str:
    """Stripped text of the first element matching *selector* ('' if none)."""
    match = root.select_one(selector)
    return match.get_text().strip() if match else ""


def iframe_sources(soup: BeautifulSoup | Tag) -> list[str]:
    """Raw ``src`` values of every ``<iframe src>``, in document order."""
    return [src for el in soup.select("iframe[src]") if (src := attr_str(el, "src"))]
