"""Data models for The Science Brief."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .core import utc_now


class BriefModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """JSON-ready dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class FeedDescriptor(BriefModel):
    """Identity and location of one syndication source."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    url: str
    category: Optional[str] = None
    enabled: bool = True


class Article(BriefModel):
    """
    A normalized feed item.

    `id` is `{feed_id}-{index}-{fetch ms}`: unique within one aggregation run
    only. Refetching the same item later yields a different id.
    """

    id: str
    feed_id: str
    title: str
    journal: str
    authors: str = "Unknown authors"
    description: str = ""
    date: datetime
    link: str = ""
    doi: Optional[str] = None
    keywords: list[str] = []

    # Filled once by the scoring stage
    pitch_score: Optional[int] = None
    suggested_publications: Optional[list[str]] = None

    @property
    def is_scored(self) -> bool:
        return self.pitch_score is not None


class FeedResult(BriefModel):
    """Outcome of fetching one feed. Failures are data, never exceptions."""

    success: bool
    feed_id: str
    feed_name: str
    articles: list[Article] = []
    error: Optional[str] = None
    fetched_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _check_outcome(self) -> "FeedResult":
        if self.success and self.error is not None:
            raise ValueError("successful FeedResult cannot carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("failed FeedResult requires an error message")
            if self.articles:
                raise ValueError("failed FeedResult cannot carry articles")
        return self

    @classmethod
    def failed(
        cls,
        descriptor: FeedDescriptor,
        error: str,
        fetched_at: Optional[datetime] = None,
    ) -> "FeedResult":
        return cls(
            success=False,
            feed_id=descriptor.id,
            feed_name=descriptor.name,
            error=error or "Unknown error",
            fetched_at=fetched_at or utc_now(),
        )


class FailedFeed(BriefModel):
    """One entry of the failure report."""

    feed_id: str
    feed_name: str
    error: str


class AggregationSummary(BriefModel):
    """Merged, date-sorted result of one aggregation run."""

    success: bool = True
    total_feeds: int
    successful_feeds: int
    failed_feeds: list[FailedFeed] = []
    total_articles: int
    articles: list[Article] = []
    fetched_at: datetime = Field(default_factory=utc_now)


class PitchAssessment(BriefModel):
    """Scoring output for one article."""

    pitch_score: int = Field(ge=20, le=100)
    suggested_publications: list[str] = Field(default_factory=list, max_length=5)
