"""Raw URL -> StreamDescriptor classification."""

from __future__ import annotations

from urllib.parse import urlparse

from streamscout.domain.entities.stream import (
    StreamContainer,
    StreamDescriptor,
    StreamQuality,
)

# First match wins.
_QUALITY_RULES: tuple[tuple[tuple[str, ...], StreamQuality], ...] = (
    (("2160", "4k"), StreamQuality.UHD_2160P),
    (("1080", "fullhd", "fhd"), StreamQuality.FHD_1080P),
    (("720", "hd"), StreamQuality.HD_720P),
    (("480",), StreamQuality.SD_480P),
)


def detect_quality(url: str) -> StreamQuality:
    """Classify *url* into a quality tier by substring markers."""
    lower = url.lower()
    for markers, quality in _QUALITY_RULES:
        if any(marker in lower for marker in markers):
            return quality
    return StreamQuality.SD


def detect_container(url: str) -> StreamContainer:
    """HLS for ``.m3u8`` paths, DASH for ``.mpd``, MP4 otherwise."""
    try:
        path = urlparse(url).path.lower()
    except ValueError:
        path = url.lower()
    if path.endswith(".m3u8"):
        return StreamContainer.HLS
    if path.endswith(".mpd"):
        return StreamContainer.DASH
    return StreamContainer.MP4


def normalize_stream_url(url: str, *, title_prefix: str) -> StreamDescriptor:
    """Wrap a raw stream URL in a descriptor."""
    quality = detect_quality(url)
    return StreamDescriptor(
        title=f"{title_prefix} | {quality.value}",
        url=url,
        quality=quality,
        container=detect_container(url),
    )
