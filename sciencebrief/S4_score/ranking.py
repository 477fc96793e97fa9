"""Sorting and tier filtering of scored articles."""

from ..models import Article
from .pitch import pitch_tier

SORT_KEYS = ("date", "score")
TIER_FILTERS = ("all", "high", "medium")


def sort_articles(articles: list[Article], by: str = "date") -> list[Article]:
    """
    Sort newest first (`date`) or highest pitch first (`score`).

    Both sorts are stable; unscored articles sink to the bottom of `score`.
    """
    if by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {by}")
    if by == "score":
        return sorted(
            articles,
            key=lambda a: a.pitch_score if a.pitch_score is not None else -1,
            reverse=True,
        )
    return sorted(articles, key=lambda a: a.date, reverse=True)


def filter_by_tier(articles: list[Article], tier: str = "all") -> list[Article]:
    """Keep articles of one pitch tier ('all' keeps everything)."""
    if tier not in TIER_FILTERS:
        raise ValueError(f"Unknown tier: {tier}")
    if tier == "all":
        return list(articles)
    return [
        a for a in articles
        if a.pitch_score is not None and pitch_tier(a.pitch_score) == tier
    ]
