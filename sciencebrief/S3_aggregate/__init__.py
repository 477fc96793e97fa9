"""Step 3: Aggregate feeds concurrently into one ranked batch."""

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..core import utc_now
from ..models import AggregationSummary, Article, FailedFeed, FeedDescriptor, FeedResult
from ..registry import FeedRegistry
from ..S2_fetch import fetch

__all__ = [
    "EmptyFeedListError",
    "aggregate",
    "merge_results",
    "resolve_descriptors",
]

logger = logging.getLogger(__name__)

MAX_WORKERS_ENV = "AGGREGATE_MAX_WORKERS"
DEFAULT_MAX_WORKERS = 32

Fetcher = Callable[[FeedDescriptor], FeedResult]


class EmptyFeedListError(ValueError):
    """Aggregation was requested with no feeds."""

    def __init__(self, message: str = "No feeds to fetch"):
        super().__init__(message)


def aggregate(
    descriptors: Optional[Sequence[FeedDescriptor]],
    fetcher: Fetcher = fetch,
    max_workers: Optional[int] = None,
) -> AggregationSummary:
    """
    Fetch every feed concurrently, wait for all, merge and sort.

    A failing feed never affects the others: its outcome is reported in
    `failed_feeds` and the call still succeeds, even if every feed fails.

    Args:
        descriptors: Feeds to fetch (must be non-empty)
        fetcher: Single-feed fetch function (defaults to S2 fetch)
        max_workers: Thread cap; defaults to one thread per feed, at most 32

    Returns:
        AggregationSummary with articles sorted newest first

    Raises:
        EmptyFeedListError: descriptors is None or empty
    """
    if not descriptors:
        raise EmptyFeedListError()

    descriptors = list(descriptors)
    workers = _resolve_max_workers(len(descriptors), max_workers)
    logger.info(f"Fetching {len(descriptors)} feeds (workers={workers})...")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_fetch_isolated, fetcher, descriptor)
            for descriptor in descriptors
        ]
    # Executor exit is the join point: every future is settled here
    results = [future.result() for future in futures]

    summary = merge_results(results)
    logger.info(
        f"Aggregated {summary.total_articles} articles from "
        f"{summary.successful_feeds}/{summary.total_feeds} feeds"
    )
    return summary


def merge_results(results: Sequence[FeedResult]) -> AggregationSummary:
    """
    Combine per-feed outcomes into one summary.

    Articles of successful feeds are concatenated in feed order, then stably
    sorted by date descending, so the final order never depends on which
    fetch finished first.
    """
    articles: list[Article] = []
    failed: list[FailedFeed] = []
    succeeded = 0

    for result in results:
        if result.success:
            succeeded += 1
            articles.extend(result.articles)
        else:
            failed.append(FailedFeed(
                feed_id=result.feed_id,
                feed_name=result.feed_name,
                error=result.error or "Unknown error",
            ))

    articles.sort(key=lambda a: a.date, reverse=True)

    return AggregationSummary(
        total_feeds=len(results),
        successful_feeds=succeeded,
        failed_feeds=failed,
        total_articles=len(articles),
        articles=articles,
        fetched_at=utc_now(),
    )


def resolve_descriptors(
    registry: FeedRegistry,
    categories: Optional[str | Iterable[str]] = None,
    feeds: Optional[Sequence[FeedDescriptor | dict]] = None,
) -> list[FeedDescriptor]:
    """
    Decide which feeds a request covers.

    Priority: explicit feed list > named categories > all enabled feeds.
    Unknown category names are ignored; disabled registry feeds are skipped.
    """
    if feeds:
        return [
            f if isinstance(f, FeedDescriptor) else FeedDescriptor.model_validate(f)
            for f in feeds
        ]

    if categories:
        if isinstance(categories, str):
            categories = categories.split(",")
        out: list[FeedDescriptor] = []
        for category in categories:
            out.extend(registry.feeds(category.strip()))
        return out

    return registry.all_feeds()


def _fetch_isolated(fetcher: Fetcher, descriptor: FeedDescriptor) -> FeedResult:
    """Run a fetcher, turning any escaped exception into a failed result."""
    try:
        return fetcher(descriptor)
    except Exception as e:
        logger.error(f"Fetcher raised for {descriptor.name}: {e}", exc_info=True)
        return FeedResult.failed(descriptor, str(e) or type(e).__name__)


def _resolve_max_workers(total_feeds: int, requested: Optional[int] = None) -> int:
    if requested is None:
        env_value = os.environ.get(MAX_WORKERS_ENV)
        try:
            requested = int(env_value) if env_value else min(total_feeds, DEFAULT_MAX_WORKERS)
        except ValueError:
            requested = min(total_feeds, DEFAULT_MAX_WORKERS)
    requested = max(1, requested)
    return min(requested, total_feeds)
