"""Date formatting and parsing utilities."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional


# Standard format constants
DATE_FORMAT = "%Y-%m-%d"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def today() -> str:
    """
    Get today's date as YYYY-MM-DD string.

    Returns:
        Date string in YYYY-MM-DD format
    """
    return datetime.now().strftime(DATE_FORMAT)


def now_iso() -> str:
    """
    Get current UTC datetime as ISO format string.

    Returns:
        Datetime string in ISO format
    """
    return utc_now().isoformat()


def to_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def timestamp_ms(dt: datetime) -> int:
    """Milliseconds since the epoch."""
    return int(dt.timestamp() * 1000)


def from_struct_time(value) -> Optional[datetime]:
    """Convert feedparser's `*_parsed` struct_time (always UTC)."""
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def parse_feed_date(text: Optional[str]) -> Optional[datetime]:
    """
    Parse an RSS (RFC 822) or Atom/Dublin Core (ISO 8601) date string.

    Args:
        text: Raw date text from a feed item

    Returns:
        UTC-aware datetime, or None if the text is not a recognisable date
    """
    if not text or not isinstance(text, str):
        return None
    text = text.strip()
    if not text:
        return None

    try:
        return to_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        pass

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return to_utc(datetime.fromisoformat(iso_text))
    except ValueError:
        return None
