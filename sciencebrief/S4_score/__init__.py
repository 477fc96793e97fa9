"""Step 4: Pitch scoring and outlet suggestions."""

from .pitch import (
    keyword_bonus,
    pitch_label,
    pitch_score,
    pitch_tier,
    recency_bonus,
    score,
    score_articles,
    suggest_publications,
    title_bonus,
)
from .ranking import SORT_KEYS, TIER_FILTERS, filter_by_tier, sort_articles

__all__ = [
    "score",
    "score_articles",
    "pitch_score",
    "pitch_tier",
    "pitch_label",
    "keyword_bonus",
    "recency_bonus",
    "title_bonus",
    "suggest_publications",
    "sort_articles",
    "filter_by_tier",
    "SORT_KEYS",
    "TIER_FILTERS",
]
