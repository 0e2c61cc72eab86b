"""Tests for StreamResolveUseCase and its URL helpers."""

from __future__ import annotations

import pytest

from streamscout.application.use_cases.resolve_streams import (
    StreamResolveUseCase,
    build_candidate_urls,
    dedupe_urls,
    normalize_identifier,
    quote_component,
    search_page_url,
)
from streamscout.domain.entities.stream import StreamContainer, StreamQuality
from streamscout.infrastructure.extraction.extractor import extract_stream_urls
from streamscout.infrastructure.extraction.json_probe import NullJsonProbe
from streamscout.infrastructure.extraction.normalizer import normalize_stream_url

_BASE = "https://a.111477.xyz"


class _StubFollower:
    def __init__(self, urls: list[str] | None = None) -> None:
        self.urls = urls or []
        self.calls: list[str] = []

    async def follow(self, page_url: str, html: str) -> list[str]:
        self.calls.append(page_url)
        return list(self.urls)


class _StubProbe:
    name = "stub"

    def __init__(self, urls=None, error: Exception | None = None) -> None:
        self.urls = urls or []
        self.error = error
        self.calls: list[str] = []

    async def probe(self, html: str, page_url: str) -> list[str]:
        self.calls.append(page_url)
        if self.error is not None:
            raise self.error
        return list(self.urls)


def _use_case(fetcher, *, follower=None, probe=None) -> StreamResolveUseCase:
    return StreamResolveUseCase(
        fetcher=fetcher,
        iframe_follower=follower or _StubFollower(),
        json_probe=probe or NullJsonProbe(),
        extract=extract_stream_urls,
        normalize=normalize_stream_url,
        provider_id="a111477",
        base_url=_BASE,
        title_prefix="A111477",
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_quote_component_matches_uri_component_encoding(self) -> None:
        assert quote_component("a b/c?d&e") == "a%20b%2Fc%3Fd%26e"
        assert quote_component("it's(ok)!*~") == "it's(ok)!*~"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("a111477:watch/foo", "watch/foo"),
            ("a111477:/watch/foo", "watch/foo"),
            ("//foo", "foo"),
            ("tt0133093", "tt0133093"),
            ("other:foo", "other:foo"),
        ],
    )
    def test_normalize_identifier(self, raw: str, expected: str) -> None:
        assert normalize_identifier(raw, "a111477") == expected

    def test_candidate_order(self) -> None:
        assert build_candidate_urls(_BASE, "the matrix") == [
            f"{_BASE}/watch/the matrix",
            f"{_BASE}/movie/the matrix",
            f"{_BASE}/the matrix",
            f"{_BASE}/?s=the%20matrix",
            f"{_BASE}/player.php?id=the%20matrix",
        ]

    def test_search_page_url(self) -> None:
        assert search_page_url(_BASE, "a&b") == f"{_BASE}/?s=a%26b"

    def test_dedupe_keeps_first_seen_order(self) -> None:
        assert dedupe_urls(["b", "", "a", "b", None, "a"]) == ["b", "a"]


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class TestCandidateOrder:
    async def test_stops_at_first_hit(self, make_fetcher) -> None:
        fetcher = make_fetcher(
            {
                f"{_BASE}/movie/foo": '<video src="/v/foo.1080p.mp4"></video>',
                f"{_BASE}/foo": '<video src="/v/other.mp4"></video>',
            }
        )

        streams = await _use_case(fetcher).execute({"id": "a111477:foo"})

        assert fetcher.urls == [f"{_BASE}/watch/foo", f"{_BASE}/movie/foo"]
        assert [s.url for s in streams] == [f"{_BASE}/v/foo.1080p.mp4"]
        assert streams[0].quality is StreamQuality.FHD_1080P
        assert streams[0].container is StreamContainer.MP4
        assert streams[0].title == "A111477 | 1080p"

    async def test_empty_page_advances_to_next(self, make_fetcher) -> None:
        fetcher = make_fetcher(
            {
                f"{_BASE}/watch/foo": "<p>nothing</p>",
                f"{_BASE}/movie/foo": "<p>nothing</p>",
                f"{_BASE}/foo": "<p>nothing</p>",
                f"{_BASE}/?s=foo": "<p>nothing</p>",
                f"{_BASE}/player.php?id=foo": (
                    "<script>var src='https://cdn.x/hls/foo.m3u8';</script>"
                ),
            }
        )

        streams = await _use_case(fetcher).execute("foo")

        assert [s.url for s in streams] == ["https://cdn.x/hls/foo.m3u8"]
        assert streams[0].container is StreamContainer.HLS
        assert len(fetcher.urls) == 5

    async def test_query_used_when_id_missing(self, make_fetcher) -> None:
        fetcher = make_fetcher(
            {f"{_BASE}/watch/bar": '<a href="/dl/bar.mkv">file</a>'}
        )

        streams = await _use_case(fetcher).execute({"query": "  bar  "})

        assert [s.url for s in streams] == [f"{_BASE}/dl/bar.mkv"]

    async def test_multiple_streams_deduplicated(self, make_fetcher) -> None:
        html = """
        <video src="/v/a.mp4"><source src="/v/a.mp4"></video>
        <a href="/v/b.m3u8">Play</a>
        """
        fetcher = make_fetcher({f"{_BASE}/watch/x": html})

        streams = await _use_case(fetcher).execute({"id": "x"})

        assert sorted(s.url for s in streams) == [f"{_BASE}/v/a.mp4", f"{_BASE}/v/b.m3u8"]


class TestIframeAndProbe:
    async def test_follower_used_only_when_extraction_empty(self, make_fetcher) -> None:
        fetcher = make_fetcher(
            {
                f"{_BASE}/watch/x": "<p>no media</p>",
                f"{_BASE}/movie/x": '<video src="/v/x.mp4"></video>',
            }
        )
        follower = _StubFollower()

        await _use_case(fetcher, follower=follower).execute("x")

        assert follower.calls == [f"{_BASE}/watch/x"]

    async def test_follower_results_count_as_hit(self, make_fetcher) -> None:
        fetcher = make_fetcher({f"{_BASE}/watch/x": "<p>no media</p>"})
        follower = _StubFollower(["https://cdn.x/inner.m3u8"])

        streams = await _use_case(fetcher, follower=follower).execute("x")

        assert [s.url for s in streams] == ["https://cdn.x/inner.m3u8"]
        assert fetcher.urls == [f"{_BASE}/watch/x"]

    async def test_probe_results_merged(self, make_fetcher) -> None:
        fetcher = make_fetcher({f"{_BASE}/watch/x": '<video src="/v/x.mp4"></video>'})
        probe = _StubProbe(["https://cdn.x/x.720p.m3u8", f"{_BASE}/v/x.mp4"])

        streams = await _use_case(fetcher, probe=probe).execute("x")

        assert sorted(s.url for s in streams) == [
            "https://cdn.x/x.720p.m3u8",
            f"{_BASE}/v/x.mp4",
        ]
        assert probe.calls == [f"{_BASE}/watch/x"]

    async def test_probe_error_is_swallowed(self, make_fetcher) -> None:
        fetcher = make_fetcher({f"{_BASE}/watch/x": '<video src="/v/x.mp4"></video>'})
        probe = _StubProbe(error=RuntimeError("boom"))

        streams = await _use_case(fetcher, probe=probe).execute("x")

        assert [s.url for s in streams] == [f"{_BASE}/v/x.mp4"]


class TestSearchFallback:
    async def test_fallback_after_all_candidates_fail(self, make_fetcher) -> None:
        # Five candidates plus one fallback fetch of the search page.
        fetcher = make_fetcher({f"{_BASE}/?s=foo": "<p>nothing</p>"})
        uc = _use_case(fetcher)

        assert await uc.execute("foo") == []
        assert fetcher.urls[-1] == f"{_BASE}/?s=foo"
        assert len(fetcher.urls) == 6

    async def test_fallback_finds_streams(self, make_fetcher) -> None:
        pages = {f"{_BASE}/?s=foo": '<a href="/v/foo.mp4">x</a>'}
        fetcher = make_fetcher(pages)

        class _FlakySearch:
            """Serves an empty page for the first search fetch only."""

            def __init__(self) -> None:
                self.seen = 0

            async def fetch_html(self, url, *, headers=None, timeout=None):
                if url == f"{_BASE}/?s=foo":
                    self.seen += 1
                    if self.seen == 1:
                        return "<p>loading</p>"
                return await fetcher.fetch_html(url, headers=headers, timeout=timeout)

        streams = await _use_case(_FlakySearch()).execute("foo")

        assert [s.url for s in streams] == [f"{_BASE}/v/foo.mp4"]

    async def test_everything_fails_returns_empty(self, make_fetcher) -> None:
        fetcher = make_fetcher({})

        assert await _use_case(fetcher).execute({"id": "nope"}) == []
        assert len(fetcher.urls) == 6


class TestMissingIdentifier:
    @pytest.mark.parametrize(
        "args", [None, {}, {"id": ""}, {"query": "   "}, "", "a111477:", "a111477:///"]
    )
    async def test_returns_empty_without_fetching(self, make_fetcher, args) -> None:
        fetcher = make_fetcher({})

        assert await _use_case(fetcher).execute(args) == []
        assert fetcher.calls == []
