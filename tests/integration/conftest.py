"""Shared fixtures for integration tests.

These tests wire real components (CachedFetcher, DiskcacheAdapter,
extractor, use cases) through ``build_provider`` with mocked HTTP via respx.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from streamscout.infrastructure.config.schema import AppConfig


@pytest.fixture()
def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    return httpx.AsyncClient(follow_redirects=True, max_redirects=5)


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def diskcache_config(tmp_path: Path) -> AppConfig:
    """Test config backed by an on-disk cache under tmp_path."""
    return AppConfig.model_validate(
        {
            "environment": "test",
            "cache": {"backend": "diskcache", "dir": str(tmp_path / "cache")},
        }
    )
