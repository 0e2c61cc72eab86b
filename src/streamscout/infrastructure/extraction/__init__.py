"""HTML heuristics: stream extraction, iframe following, normalization."""

from .catalog_parser import parse_catalog_entries
from .extractor import extract_stream_urls
from .iframe_follower import IframeFollower
from .json_probe import NullJsonProbe, PlayerConfigJsonProbe, create_json_probe
from .normalizer import detect_container, detect_quality, normalize_stream_url

__all__ = [
    "IframeFollower",
    "NullJsonProbe",
    "PlayerConfigJsonProbe",
    "create_json_probe",
    "detect_container",
    "detect_quality",
    "extract_stream_urls",
    "normalize_stream_url",
    "parse_catalog_entries",
]
