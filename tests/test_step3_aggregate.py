#!/usr/bin/env python
"""Step 3: Aggregate - unit tests"""

import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from sciencebrief.models import Article, FeedDescriptor, FeedResult
from sciencebrief.registry import parse_registry
from sciencebrief.S2_fetch import fetch
from sciencebrief.S3_aggregate import (
    DEFAULT_MAX_WORKERS,
    EmptyFeedListError,
    _resolve_max_workers,
    aggregate,
    merge_results,
    resolve_descriptors,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_descriptor(feed_id: str, **kwargs) -> FeedDescriptor:
    return FeedDescriptor(id=feed_id, name=feed_id.upper(), url=f"https://feeds.test/{feed_id}", **kwargs)


def make_article(feed_id: str, index: int, days_old: float) -> Article:
    return Article(
        id=f"{feed_id}-{index}",
        feed_id=feed_id,
        title=f"{feed_id} article {index}",
        journal=feed_id.upper(),
        date=NOW - timedelta(days=days_old),
    )


def ok(descriptor: FeedDescriptor, *ages: float) -> FeedResult:
    return FeedResult(
        success=True,
        feed_id=descriptor.id,
        feed_name=descriptor.name,
        articles=[make_article(descriptor.id, i, age) for i, age in enumerate(ages)],
    )


class TestAggregate:
    """Fan-out / fan-in"""

    def test_empty_list_rejected(self):
        with pytest.raises(EmptyFeedListError):
            aggregate([], fetcher=lambda d: ok(d))

    def test_none_rejected(self):
        with pytest.raises(EmptyFeedListError):
            aggregate(None, fetcher=lambda d: ok(d))

    def test_empty_error_is_value_error(self):
        assert issubclass(EmptyFeedListError, ValueError)
        assert str(EmptyFeedListError()) == "No feeds to fetch"

    def test_one_ok_one_unreachable(self):
        """A valid feed plus an unreachable host"""
        doc = b"""<?xml version="1.0"?>
<rss version="2.0"><channel><title>A</title>
<item><title>one</title><pubDate>Fri, 31 May 2024 10:00:00 GMT</pubDate></item>
<item><title>two</title><pubDate>Thu, 30 May 2024 10:00:00 GMT</pubDate></item>
<item><title>three</title><pubDate>Wed, 29 May 2024 10:00:00 GMT</pubDate></item>
</channel></rss>"""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "a.test":
                return httpx.Response(200, content=doc)
            raise httpx.ConnectError("unreachable host", request=request)

        a = FeedDescriptor(id="a", name="A", url="https://a.test/rss")
        b = FeedDescriptor(id="b", name="B", url="https://b.test/rss")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            summary = aggregate([a, b], fetcher=lambda d: fetch(d, client=client))

        assert summary.success is True
        assert summary.total_feeds == 2
        assert summary.successful_feeds == 1
        assert summary.total_articles == 3
        assert [f.feed_id for f in summary.failed_feeds] == ["b"]
        assert summary.failed_feeds[0].feed_name == "B"
        assert "unreachable host" in summary.failed_feeds[0].error
        assert [art.title for art in summary.articles] == ["one", "two", "three"]

    def test_all_failed_still_succeeds(self):
        descriptors = [make_descriptor("a"), make_descriptor("b")]
        summary = aggregate(descriptors, fetcher=lambda d: FeedResult.failed(d, "down"))

        assert summary.success is True
        assert summary.successful_feeds == 0
        assert summary.total_articles == 0
        assert summary.articles == []
        assert [f.feed_id for f in summary.failed_feeds] == ["a", "b"]

    def test_sorted_newest_first(self):
        def fetcher(d):
            return ok(d, 5, 1) if d.id == "a" else ok(d, 3, 0.5, 10)

        summary = aggregate([make_descriptor("a"), make_descriptor("b")], fetcher=fetcher)

        dates = [a.date for a in summary.articles]
        assert dates == sorted(dates, reverse=True)
        assert summary.total_articles == len(summary.articles) == 5

    def test_counts_consistent(self):
        descriptors = [make_descriptor(x) for x in "abcd"]

        def fetcher(d):
            if d.id in ("b", "d"):
                return FeedResult.failed(d, "down")
            return ok(d, 1, 2)

        summary = aggregate(descriptors, fetcher=fetcher)
        assert summary.successful_feeds + len(summary.failed_feeds) == summary.total_feeds
        assert summary.total_articles == len(summary.articles)

    def test_failed_feeds_in_input_order(self):
        descriptors = [make_descriptor(x) for x in "zyx"]
        summary = aggregate(descriptors, fetcher=lambda d: FeedResult.failed(d, "down"))
        assert [f.feed_id for f in summary.failed_feeds] == ["z", "y", "x"]

    def test_raising_fetcher_isolated(self):
        """An exception in one fetch becomes that feed's failure"""
        def fetcher(d):
            if d.id == "bad":
                raise RuntimeError("kaboom")
            return ok(d, 1)

        summary = aggregate([make_descriptor("good"), make_descriptor("bad")], fetcher=fetcher)
        assert summary.successful_feeds == 1
        assert summary.failed_feeds[0].feed_id == "bad"
        assert summary.failed_feeds[0].error == "kaboom"

    def test_fetches_run_concurrently(self, monkeypatch):
        """All fetches are in flight at the same time"""
        monkeypatch.delenv("AGGREGATE_MAX_WORKERS", raising=False)
        descriptors = [make_descriptor(f"f{i}") for i in range(5)]
        barrier = threading.Barrier(len(descriptors), timeout=5)

        def fetcher(d):
            barrier.wait()
            return ok(d, 1)

        summary = aggregate(descriptors, fetcher=fetcher)
        assert summary.successful_feeds == 5

    def test_single_worker_still_completes(self):
        descriptors = [make_descriptor(x) for x in "abc"]
        summary = aggregate(descriptors, fetcher=lambda d: ok(d, 1), max_workers=1)
        assert summary.successful_feeds == 3


class TestMergeResults:
    """Merge step on its own"""

    def test_ties_keep_feed_order(self):
        """Stable sort: equal dates stay in feed order"""
        a, b = make_descriptor("a"), make_descriptor("b")
        summary = merge_results([ok(a, 1), ok(b, 1)])
        assert [art.feed_id for art in summary.articles] == ["a", "b"]

    def test_wire_names(self):
        summary = merge_results([FeedResult.failed(make_descriptor("a"), "down")])
        data = summary.to_dict()
        assert data["totalFeeds"] == 1
        assert data["successfulFeeds"] == 0
        assert data["totalArticles"] == 0
        assert data["failedFeeds"] == [{"feedId": "a", "feedName": "A", "error": "down"}]


class TestResolveMaxWorkers:
    """Thread count resolution"""

    def test_default_one_per_feed(self, monkeypatch):
        monkeypatch.delenv("AGGREGATE_MAX_WORKERS", raising=False)
        assert _resolve_max_workers(12) == 12

    def test_default_capped(self, monkeypatch):
        """Large feed lists do not get one thread each"""
        monkeypatch.delenv("AGGREGATE_MAX_WORKERS", raising=False)
        assert _resolve_max_workers(5000) == DEFAULT_MAX_WORKERS == 32

    def test_env_can_raise_cap(self, monkeypatch):
        monkeypatch.setenv("AGGREGATE_MAX_WORKERS", "64")
        assert _resolve_max_workers(100) == 64

    def test_capped_by_feeds(self):
        assert _resolve_max_workers(2, 10) == 2

    def test_min_workers_is_one(self):
        assert _resolve_max_workers(3, 0) == 1

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("AGGREGATE_MAX_WORKERS", "2")
        assert _resolve_max_workers(10) == 2

    def test_bad_env_ignored(self, monkeypatch):
        monkeypatch.setenv("AGGREGATE_MAX_WORKERS", "many")
        assert _resolve_max_workers(4) == 4


class TestResolveDescriptors:
    """Which feeds a request covers"""

    REGISTRY = parse_registry({
        "psychology": [
            {"id": "psych-sci", "name": "Psychological Science", "url": "https://feeds.test/pss"},
            {"id": "curr-dir", "name": "Current Directions", "url": "https://feeds.test/cdp", "enabled": False},
        ],
        "music": [
            {"id": "music-perc", "name": "Music Perception", "url": "https://feeds.test/mp"},
        ],
        "perception": [
            {"id": "perception", "name": "Perception", "url": "https://feeds.test/pec"},
        ],
    })

    def test_all_enabled(self):
        ids = [d.id for d in resolve_descriptors(self.REGISTRY)]
        assert ids == ["psych-sci", "music-perc", "perception"]

    def test_categories_string(self):
        ids = [d.id for d in resolve_descriptors(self.REGISTRY, categories="music, perception")]
        assert ids == ["music-perc", "perception"]

    def test_categories_list(self):
        ids = [d.id for d in resolve_descriptors(self.REGISTRY, categories=["psychology"])]
        assert ids == ["psych-sci"]

    def test_unknown_category_ignored(self):
        assert resolve_descriptors(self.REGISTRY, categories="astrology") == []

    def test_explicit_feeds_win(self):
        feeds = [{"id": "x", "name": "X", "url": "https://feeds.test/x"}]
        result = resolve_descriptors(self.REGISTRY, categories="music", feeds=feeds)
        assert [d.id for d in result] == ["x"]
        assert isinstance(result[0], FeedDescriptor)

    def test_category_injected(self):
        (descriptor,) = resolve_descriptors(self.REGISTRY, categories="music")
        assert descriptor.category == "music"

    def test_unknown_category_then_aggregate_is_empty(self):
        descriptors = resolve_descriptors(self.REGISTRY, categories="astrology")
        with pytest.raises(EmptyFeedListError):
            aggregate(descriptors, fetcher=lambda d: ok(d))

