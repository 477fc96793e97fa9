"""Step 2: Fetch feeds."""

from .rss import (
    FETCH_TIMEOUT,
    HEADERS,
    FeedParseError,
    custom_descriptor,
    download,
    fetch,
    fetch_url,
    parse_document,
)

__all__ = [
    "FETCH_TIMEOUT",
    "HEADERS",
    "FeedParseError",
    "custom_descriptor",
    "download",
    "fetch",
    "fetch_url",
    "parse_document",
]
