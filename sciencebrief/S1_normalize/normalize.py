"""Map a raw feed item onto the canonical Article."""

from collections.abc import Mapping
from datetime import datetime

from ..core import generate_article_id
from ..models import Article, FeedDescriptor
from .config import UNTITLED
from .fields import (
    field_text,
    extract_authors,
    extract_date,
    extract_description,
    extract_doi,
    extract_keywords,
)
from .html import html_to_text


def normalize_item(
    item: Mapping,
    descriptor: FeedDescriptor,
    index: int,
    fetched_at: datetime,
) -> Article:
    """
    Normalize one raw item.

    Args:
        item: Raw feed item (feedparser entry or plain dict)
        descriptor: Source feed
        index: Position of the item in the feed document
        fetched_at: Fetch time of the feed (id component and date fallback)

    Returns:
        Unscored Article
    """
    description = extract_description(item)
    title = html_to_text(field_text(item.get("title")) or UNTITLED)

    return Article(
        id=generate_article_id(descriptor.id, index, fetched_at),
        feed_id=descriptor.id,
        title=title,
        journal=descriptor.name,
        authors=html_to_text(extract_authors(item, description)),
        description=description,
        date=extract_date(item, fetched_at),
        link=field_text(item.get("link")),
        doi=extract_doi(item, description),
        keywords=extract_keywords(title, description),
    )


def normalize_items(
    items: list[Mapping],
    descriptor: FeedDescriptor,
    fetched_at: datetime,
) -> list[Article]:
    """Normalize all items of one feed, preserving document order."""
    return [
        normalize_item(item, descriptor, index, fetched_at)
        for index, item in enumerate(items)
    ]
