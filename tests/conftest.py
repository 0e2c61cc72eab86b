"""Shared test fixtures for the streamscout test suite."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from streamscout.domain.exceptions import FetchError
from streamscout.infrastructure.cache.memory_adapter import MemoryCacheAdapter
from streamscout.infrastructure.config.schema import AppConfig

BASE_URL = "https://a.111477.xyz"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """In-memory PageFetcherPort.

    *pages* maps URL -> HTML.  Unknown URLs raise ``FetchError`` (404).
    Every call is recorded in ``calls`` as ``(url, headers)``.
    """

    def __init__(self, pages: Mapping[str, str] | None = None) -> None:
        self.pages: dict[str, str] = dict(pages or {})
        self.calls: list[tuple[str, dict[str, str]]] = []

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    async def fetch_html(self, url, *, headers=None, timeout=None) -> str:
        self.calls.append((url, dict(headers or {})))
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", 404)
        return self.pages[url]

    async def fetch(self, url, *, headers=None, timeout=None, response_type="text"):
        return await self.fetch_html(url, headers=headers, timeout=timeout)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def base_url() -> str:
    return BASE_URL


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def memory_cache(clock: FakeClock) -> MemoryCacheAdapter:
    return MemoryCacheAdapter(ttl_seconds=300, check_period_seconds=120, clock=clock)


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def app_config() -> AppConfig:
    """Default config in the test environment."""
    return AppConfig(environment="test")


@pytest.fixture()
def make_fetcher():
    """Factory for FakeFetcher instances preloaded with pages."""

    def _make(pages: Mapping[str, str] | None = None) -> FakeFetcher:
        return FakeFetcher(pages)

    return _make
