"""End-to-end provider tests: build_provider + respx-mocked site."""

from __future__ import annotations

import httpx
import pytest
import respx

from streamscout.infrastructure.config.schema import AppConfig
from streamscout.interfaces.composition import build_provider

pytestmark = pytest.mark.integration

_BASE = "https://a.111477.xyz"

_MOVIE_PAGE = """
<html><body>
  <h1>Foo (2024)</h1>
  <video controls src="/media/foo.1080p.mp4"></video>
  <script>
    var fallback = "https://cdn.example/hls/foo/master.m3u8";
  </script>
</body></html>
"""

_SEARCH_PAGE = """
<html><body>
  <article><h2>Foo (2024)</h2><a href="/watch/foo-2024">Watch now</a></article>
  <article><a href="https://a.111477.xyz/watch/foo-returns">Foo Returns</a></article>
</body></html>
"""


def _catch_all(router: respx.MockRouter) -> None:
    # Registered last so specific routes win.
    router.route(host="a.111477.xyz").respond(404)


class TestResolve:
    async def test_resolves_first_matching_candidate(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        watch = respx_mock.get(f"{_BASE}/watch/foo").respond(404)
        movie = respx_mock.get(f"{_BASE}/movie/foo").respond(200, text=_MOVIE_PAGE)
        _catch_all(respx_mock)

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            streams = await provider.get_streams_for_id({"id": "a111477:foo"})

        assert watch.call_count == 1
        assert movie.call_count == 1
        by_url = {s["url"]: s for s in streams}
        assert set(by_url) == {
            f"{_BASE}/media/foo.1080p.mp4",
            "https://cdn.example/hls/foo/master.m3u8",
        }
        assert by_url[f"{_BASE}/media/foo.1080p.mp4"]["quality"] == "1080p"
        assert by_url[f"{_BASE}/media/foo.1080p.mp4"]["title"] == "A111477 | 1080p"
        assert by_url["https://cdn.example/hls/foo/master.m3u8"]["container"] == "hls"
        assert movie.calls.last.request.headers["Referer"] == _BASE
        await http_client.aclose()

    async def test_successful_pages_are_cached(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        watch = respx_mock.get(f"{_BASE}/watch/foo").respond(404)
        movie = respx_mock.get(f"{_BASE}/movie/foo").respond(200, text=_MOVIE_PAGE)
        _catch_all(respx_mock)

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            first = await provider.get_streams_for_id("foo")
            second = await provider.get_streams_for_id("foo")

        assert first == second
        assert movie.call_count == 1
        # Failures are never cached.
        assert watch.call_count == 2
        await http_client.aclose()

    async def test_follows_redirects(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        respx_mock.get(f"{_BASE}/watch/foo").respond(
            301, headers={"Location": f"{_BASE}/watch/foo-2024"}
        )
        respx_mock.get(f"{_BASE}/watch/foo-2024").respond(200, text=_MOVIE_PAGE)
        _catch_all(respx_mock)

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            streams = await provider.get_streams_for_id("foo")

        assert len(streams) == 2
        await http_client.aclose()

    async def test_unreachable_site_returns_empty(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        route = respx_mock.route(host="a.111477.xyz").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            assert await provider.get_streams_for_id({"id": "foo"}) == []

        # Five candidates plus the search fallback.
        assert route.call_count == 6
        await http_client.aclose()

    async def test_unfetchable_candidate_urls_are_skipped(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        # A raw tab makes the watch, movie and bare URLs invalid; the search
        # candidate percent-encodes it.
        search = respx_mock.get(f"{_BASE}/", params={"s": "foo\tbar"}).respond(
            200, text='<video src="/v/foo.mp4"></video>'
        )
        _catch_all(respx_mock)

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            streams = await provider.get_streams_for_id({"id": "foo\tbar"})

        assert [s["url"] for s in streams] == [f"{_BASE}/v/foo.mp4"]
        assert search.call_count == 1
        await http_client.aclose()


class TestSearch:
    async def test_search_returns_entries(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        respx_mock.get(f"{_BASE}/?s=foo%20bar").respond(200, text=_SEARCH_PAGE)
        _catch_all(respx_mock)

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            entries = await provider.search("foo bar")

        assert entries == [
            {
                "id": "a111477:watch/foo-2024",
                "name": "Foo (2024)",
                "type": "movie",
                "url": f"{_BASE}/watch/foo-2024",
            },
            {
                "id": "a111477:watch/foo-returns",
                "name": "Foo Returns",
                "type": "movie",
                "url": f"{_BASE}/watch/foo-returns",
            },
        ]
        await http_client.aclose()

    async def test_search_error_returns_empty(
        self,
        respx_mock: respx.MockRouter,
        http_client: httpx.AsyncClient,
        diskcache_config: AppConfig,
    ) -> None:
        respx_mock.get(f"{_BASE}/?s=foo").respond(500)
        _catch_all(respx_mock)

        async with build_provider(diskcache_config, http_client=http_client) as provider:
            assert await provider.search("foo") == []
        await http_client.aclose()
