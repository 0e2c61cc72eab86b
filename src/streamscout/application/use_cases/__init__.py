from .resolve_streams import (
    StreamResolveUseCase,
    build_candidate_urls,
    normalize_identifier,
)
from .search_catalog import CatalogSearchUseCase

__all__ = [
    "CatalogSearchUseCase",
    "StreamResolveUseCase",
    "build_candidate_urls",
    "normalize_identifier",
]
