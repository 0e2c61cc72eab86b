"""Composition root: wires config into a ready-to-use Provider."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import structlog

from streamscout.application.use_cases.resolve_streams import StreamResolveUseCase
from streamscout.application.use_cases.search_catalog import CatalogSearchUseCase
from streamscout.domain.ports.cache import CachePort
from streamscout.infrastructure.cache.cache_factory import create_cache
from streamscout.infrastructure.config import AppConfig, load_config
from streamscout.infrastructure.extraction.catalog_parser import parse_catalog_entries
from streamscout.infrastructure.extraction.extractor import extract_stream_urls
from streamscout.infrastructure.extraction.iframe_follower import IframeFollower
from streamscout.infrastructure.extraction.json_probe import create_json_probe
from streamscout.infrastructure.extraction.normalizer import normalize_stream_url
from streamscout.infrastructure.http.fetch_cache import CachedFetcher
from streamscout.infrastructure.logging.setup import configure_logging

from .provider import Provider

log = structlog.get_logger(__name__)


def build_provider(
    config: AppConfig,
    *,
    cache: CachePort | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> Provider:
    """Build a Provider from *config*.

    *cache* and *http_client* may be injected (tests, or a host that
    shares one cache between providers).
    """
    if cache is None:
        cache = create_cache(
            config.cache_backend,
            ttl_seconds=config.cache_ttl_seconds,
            check_period_seconds=config.cache_check_period_seconds,
            directory=config.cache_dir,
            max_concurrent=config.cache_max_concurrent,
        )

    provider_cfg = config.provider
    fetcher = CachedFetcher(
        cache,
        base_url=provider_cfg.base_url,
        user_agent=config.http_user_agent,
        timeout=config.http_timeout_seconds,
        max_redirects=config.http_max_redirects,
        ttl_seconds=config.cache_ttl_seconds,
        client=http_client,
    )
    json_probe = create_json_probe(provider_cfg.json_probe)

    resolve = StreamResolveUseCase(
        fetcher=fetcher,
        iframe_follower=IframeFollower(fetcher, base_url=provider_cfg.base_url),
        json_probe=json_probe,
        extract=extract_stream_urls,
        normalize=normalize_stream_url,
        provider_id=provider_cfg.id,
        base_url=provider_cfg.base_url,
        title_prefix=provider_cfg.name,
    )
    search = CatalogSearchUseCase(
        fetcher=fetcher,
        parse=parse_catalog_entries,
        provider_id=provider_cfg.id,
        base_url=provider_cfg.base_url,
    )

    log.debug(
        "provider_built",
        provider=provider_cfg.id,
        base_url=provider_cfg.base_url,
        cache_backend=config.cache_backend,
        json_probe=json_probe.name,
    )
    return Provider(
        id=provider_cfg.id,
        name=provider_cfg.name,
        enabled=provider_cfg.enabled,
        resolve=resolve,
        search=search,
        fetcher=fetcher,
        cache=cache,
    )


def load_provider(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    setup_logging: bool = True,
) -> Provider:
    """Load config exactly once, configure logging, and build the provider."""
    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        overrides=overrides,
    )
    if setup_logging:
        configure_logging(config)
    return build_provider(config)
