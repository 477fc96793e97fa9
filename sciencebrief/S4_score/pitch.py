"""Pitch scoring: a deterministic editorial-interest heuristic."""

from datetime import datetime
from typing import Optional

from ..core import to_utc, utc_now
from ..models import Article, PitchAssessment
from .config import (
    BASE_SCORE,
    HIGH_INTEREST_BONUS,
    HIGH_INTEREST_KEYWORDS,
    HIGH_TIER,
    LONG_TITLE_BONUS,
    LONG_TITLE_CHARS,
    MAX_SCORE,
    MAX_SUGGESTIONS,
    MEDIUM_INTEREST_BONUS,
    MEDIUM_INTEREST_KEYWORDS,
    MEDIUM_TIER,
    MIN_SCORE,
    RECENCY_BONUSES,
    SCORE_OUTLETS,
    SUBTITLE_BONUS,
    TIER_LABELS,
    TOPIC_OUTLETS,
)

SECONDS_PER_DAY = 60 * 60 * 24


def keyword_bonus(keywords: list[str]) -> int:
    """+8 per high-interest keyword, +4 per medium-interest keyword."""
    present = set(keywords or [])
    high = sum(HIGH_INTEREST_BONUS for kw in HIGH_INTEREST_KEYWORDS if kw in present)
    medium = sum(MEDIUM_INTEREST_BONUS for kw in MEDIUM_INTEREST_KEYWORDS if kw in present)
    return high + medium


def recency_bonus(published: datetime, now: datetime) -> int:
    """Bonus for fresh articles, based on the article date as-is."""
    age_days = (to_utc(now) - to_utc(published)).total_seconds() / SECONDS_PER_DAY
    for max_days, bonus in RECENCY_BONUSES:
        if age_days < max_days:
            return bonus
    return 0


def title_bonus(title: str) -> int:
    """Long titles and titles with a subtitle (colon) read as more specific."""
    bonus = 0
    if len(title or "") > LONG_TITLE_CHARS:
        bonus += LONG_TITLE_BONUS
    if ":" in (title or ""):
        bonus += SUBTITLE_BONUS
    return bonus


def pitch_score(article: Article, now: Optional[datetime] = None) -> int:
    """Pitch score in [20, 100]."""
    now = now or utc_now()
    score = BASE_SCORE
    score += keyword_bonus(article.keywords)
    score += recency_bonus(article.date, now)
    score += title_bonus(article.title)
    return min(MAX_SCORE, max(MIN_SCORE, score))


def suggest_publications(keywords: list[str], score: int) -> list[str]:
    """
    Outlets that might take a pitch on this article.

    Score-threshold outlets are added before topic outlets; the result is
    deduplicated in insertion order and capped at five.
    """
    present = set(keywords or [])
    suggestions: dict[str, None] = {}

    for threshold, outlets in SCORE_OUTLETS:
        if score >= threshold:
            suggestions.update(dict.fromkeys(outlets))

    for terms, outlets in TOPIC_OUTLETS:
        if present & terms:
            suggestions.update(dict.fromkeys(outlets))

    return list(suggestions)[:MAX_SUGGESTIONS]


def score(article: Article, now: Optional[datetime] = None) -> PitchAssessment:
    """
    Score one article.

    Args:
        article: Normalized article
        now: Reference time for the recency bonus (defaults to current UTC)

    Returns:
        PitchAssessment (score and suggested outlets)
    """
    value = pitch_score(article, now)
    return PitchAssessment(
        pitch_score=value,
        suggested_publications=suggest_publications(article.keywords, value),
    )


def score_articles(articles: list[Article], now: Optional[datetime] = None) -> list[Article]:
    """Return scored copies; all articles share one reference time."""
    now = now or utc_now()
    scored = []
    for article in articles:
        assessment = score(article, now)
        scored.append(article.model_copy(update={
            "pitch_score": assessment.pitch_score,
            "suggested_publications": assessment.suggested_publications,
        }))
    return scored


def pitch_tier(value: int) -> str:
    """'high' (>=85), 'medium' (>=70) or 'low'."""
    if value >= HIGH_TIER:
        return "high"
    if value >= MEDIUM_TIER:
        return "medium"
    return "low"


def pitch_label(value: int) -> str:
    return TIER_LABELS[pitch_tier(value)]
