from .cache import CachePort
from .fetcher import PageFetcherPort, ResponseType
from .json_probe import JsonProbePort

__all__ = [
    "CachePort",
    "JsonProbePort",
    "PageFetcherPort",
    "ResponseType",
]
