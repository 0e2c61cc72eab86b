"""Domain entities for stream resolution and catalog search.

Pure value objects without I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

CatalogType = Literal["movie"]


class StreamQuality(str, Enum):
    """Quality tiers, ordered from most to least specific match."""

    UHD_2160P = "2160p"
    FHD_1080P = "1080p"
    HD_720P = "720p"
    SD_480P = "480p"
    SD = "SD"


class StreamContainer(str, Enum):
    """Playback container derived from the URL path."""

    HLS = "hls"
    DASH = "dash"
    MP4 = "mp4"


@dataclass(frozen=True)
class StreamDescriptor:
    """A playable stream handed to the host application."""

    title: str
    url: str
    quality: StreamQuality
    container: StreamContainer
    subtitles: tuple[dict[str, str], ...] = ()
    # Reserved for host compatibility (torrent hosts read infoHash).
    info_hash: str | None = None
    ver: str = "1.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "quality": self.quality.value,
            "container": self.container.value,
            "infoHash": self.info_hash,
            "subtitles": list(self.subtitles),
            "ver": self.ver,
        }


@dataclass(frozen=True)
class CatalogEntry:
    """One search hit (MetaPreview-like)."""

    id: str  # site-prefixed, e.g. "a111477:watch/some-title"
    name: str
    url: str
    type: CatalogType = "movie"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "type": self.type, "url": self.url}


@dataclass(frozen=True)
class StreamRequest:
    """Parsed host arguments for a stream lookup.

    ``raw_id`` comes from ``id`` and falls back to ``query``.  The other
    fields are carried along for hosts that send them.
    """

    raw_id: str
    imdb_id: str | None = None
    tmdb_id: str | None = None
    season: int | None = None
    episode: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_args(cls, args: Mapping[str, Any] | str | None) -> StreamRequest:
        if args is None:
            return cls(raw_id="")
        if isinstance(args, str):
            return cls(raw_id=args.strip())

        raw = args.get("id") or args.get("query") or ""
        known = {"id", "query", "imdb_id", "tmdb_id", "season", "episode"}
        return cls(
            raw_id=str(raw).strip(),
            imdb_id=_opt_str(args.get("imdb_id")),
            tmdb_id=_opt_str(args.get("tmdb_id")),
            season=_opt_int(args.get("season")),
            episode=_opt_int(args.get("episode")),
            extra={k: v for k, v in args.items() if k not in known},
        )


def _opt_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _opt_int(value: Any) -> int | None:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None
