"""RSS/Atom fetcher. Every failure becomes a failed FeedResult."""

import io
import logging
import time
from datetime import datetime
from typing import Optional

import feedparser
import httpx

from ..core import timestamp_ms, utc_now
from ..models import FeedDescriptor, FeedResult
from ..S1_normalize import normalize_items

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10.0  # seconds, whole request

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; ScienceBrief/1.0; +https://sciencebrief.app)",
    "Accept": "application/rss+xml, application/xml, text/xml, */*",
}


class FeedParseError(Exception):
    """The fetched document is not a usable RSS/Atom feed."""


def download(url: str, client: Optional[httpx.Client] = None) -> bytes:
    """
    GET a feed document within FETCH_TIMEOUT seconds in total.

    httpx timeouts apply per connect/read step, so a server trickling bytes
    could hold the request open indefinitely; the body is streamed and checked
    against an overall deadline.

    Raises:
        httpx.HTTPError: transport failure, timeout or non-2xx status
    """
    if client is None:
        with httpx.Client(headers=HEADERS, follow_redirects=True, timeout=FETCH_TIMEOUT) as own:
            return download(url, own)

    deadline = time.monotonic() + FETCH_TIMEOUT
    with client.stream("GET", url, headers=HEADERS, follow_redirects=True, timeout=FETCH_TIMEOUT) as resp:
        resp.raise_for_status()
        chunks = []
        for chunk in resp.iter_bytes():
            if time.monotonic() > deadline:
                raise httpx.ReadTimeout("total download time exceeded", request=resp.request)
            chunks.append(chunk)
    return b"".join(chunks)


def parse_document(content: bytes, source: str = "") -> list:
    """
    Parse a syndication document and return its raw entries.

    feedparser is lenient: a bozo document that still yields entries is
    accepted (with a warning), anything else is rejected.

    Raises:
        FeedParseError: content is not RSS/Atom, or is broken beyond recovery
    """
    # A file object, so feedparser never treats the body as a path or URL
    feed = feedparser.parse(io.BytesIO(content))
    entries = list(feed.entries)

    if feed.bozo and not entries:
        reason = feed.get("bozo_exception") or "unparseable document"
        raise FeedParseError(f"Invalid feed: {reason}")
    if not feed.version and not entries:
        raise FeedParseError("Not a valid RSS or Atom feed")
    if feed.bozo:
        logger.warning(f"[{source}] Feed parsed with warnings: {feed.get('bozo_exception')}")

    return entries


def fetch(
    descriptor: FeedDescriptor,
    client: Optional[httpx.Client] = None,
    now: Optional[datetime] = None,
) -> FeedResult:
    """
    Fetch and normalize one feed. Never raises.

    Args:
        descriptor: Feed to fetch
        client: Optional shared httpx client (tests inject a MockTransport)
        now: Fetch timestamp override (defaults to the current UTC time)

    Returns:
        FeedResult tagged success or failure
    """
    fetched_at = now or utc_now()
    logger.info(f"Fetching feed: {descriptor.name} ({descriptor.url})")

    try:
        content = download(descriptor.url, client)
        entries = parse_document(content, descriptor.name)
        articles = normalize_items(entries, descriptor, fetched_at)
    except httpx.TimeoutException as e:
        message = f"Timed out after {FETCH_TIMEOUT:g}s" + (f": {e}" if str(e) else "")
        logger.error(f"Error fetching {descriptor.name}: {message}")
        return FeedResult.failed(descriptor, message, fetched_at)
    except Exception as e:
        message = str(e) or type(e).__name__
        logger.error(f"Error fetching {descriptor.name}: {message}")
        return FeedResult.failed(descriptor, message, fetched_at)

    logger.info(f"  [{descriptor.name}] {len(articles)} articles")
    return FeedResult(
        success=True,
        feed_id=descriptor.id,
        feed_name=descriptor.name,
        articles=articles,
        fetched_at=fetched_at,
    )


def custom_descriptor(
    url: str,
    name: Optional[str] = None,
    feed_id: Optional[str] = None,
) -> FeedDescriptor:
    """Descriptor for an ad-hoc feed that is not in the registry."""
    return FeedDescriptor(
        id=feed_id or f"custom-{timestamp_ms(utc_now())}",
        name=name or "Custom Feed",
        url=url,
    )


def fetch_url(
    url: str,
    name: Optional[str] = None,
    feed_id: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> FeedResult:
    """Fetch an ad-hoc feed by URL."""
    return fetch(custom_descriptor(url, name, feed_id), client=client)
