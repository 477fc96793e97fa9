"""Core utilities for The Science Brief."""

from .dates import (
    DATE_FORMAT,
    now_iso,
    from_struct_time,
    parse_feed_date,
    timestamp_ms,
    today,
    to_utc,
    utc_now,
)
from .ids import generate_article_id
from .io import save_json

__all__ = [
    # IDs
    "generate_article_id",
    # I/O
    "save_json",
    # Dates
    "today",
    "now_iso",
    "utc_now",
    "to_utc",
    "timestamp_ms",
    "from_struct_time",
    "parse_feed_date",
    "DATE_FORMAT",
]
