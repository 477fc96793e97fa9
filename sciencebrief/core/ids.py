"""Article ID generation utilities."""

from datetime import datetime

from .dates import timestamp_ms


def generate_article_id(feed_id: str, index: int, fetched_at: datetime) -> str:
    """
    Generate a run-scoped article ID.

    Format: {feed_id}-{index}-{fetch timestamp in ms}

    The ID is unique within one aggregation run (feed ids are unique and the
    index is the item's position in its feed). It is NOT stable: the same
    article fetched again later gets a new ID.

    Args:
        feed_id: Descriptor id of the source feed
        index: Position of the item within the fetched document
        fetched_at: Fetch time of the feed

    Returns:
        Article ID string
    """
    return f"{feed_id}-{index}-{timestamp_ms(fetched_at)}"
