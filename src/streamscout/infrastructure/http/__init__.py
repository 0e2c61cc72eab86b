from .fetch_cache import CachedFetcher

__all__ = ["CachedFetcher"]
