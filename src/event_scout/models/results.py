"""Pipeline result models."""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from event_scout.models.event import Event
from event_scout.models.link import Link, RejectedLink


class SearchResult(BaseModel):
    """Outcome of one interest/day Scout search."""

    interest: str
    city: str
    date: dt.date
    success: bool = True
    links: list[Link] = Field(default_factory=list)
    queries_used: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class ScoutResult(BaseModel):
    all_links: list[Link] = Field(default_factory=list)
    total_links_found: int = 0
    search_results: list[SearchResult] = Field(default_factory=list)

    @property
    def failed_searches(self) -> int:
        return sum(1 for r in self.search_results if not r.success)


class BatchAnalysis(BaseModel):
    """Outcome of one Explorer batch."""

    success: bool = True
    events: list[Event] = Field(default_factory=list)
    rejected: list[RejectedLink] = Field(default_factory=list)
    analyzed: int = 0
    error: Optional[str] = None


class ExploreResult(BaseModel):
    events: list[Event] = Field(default_factory=list)
    total_analyzed: int = 0
    total_events: int = 0
    rejected: list[RejectedLink] = Field(default_factory=list)
    batches: int = 0
    failed_batches: int = 0


class CoverageEntry(BaseModel):
    """Per-day summary of how the time-of-day bands are filled."""

    model_config = ConfigDict(populate_by_name=True)

    count: int = 0
    events: list[Event] = Field(default_factory=list)
    has_morning: bool = Field(default=False, alias="hasMorning")
    has_afternoon: bool = Field(default=False, alias="hasAfternoon")
    has_evening: bool = Field(default=False, alias="hasEvening")


class DateRange(BaseModel):
    start: dt.date
    end: dt.date


class PipelineStats(BaseModel):
    mode: str
    links_found: int = 0
    links_analyzed: int = 0
    events_found: int = 0
    links_rejected: int = 0
    searches: int = 0
    failed_searches: int = 0
    batches: int = 0
    failed_batches: int = 0
    coverage_gaps: dict[str, list[str]] = Field(default_factory=dict)
    message: Optional[str] = None


class ItineraryResult(BaseModel):
    """Composed response of one orchestration run."""

    success: bool = True
    city: str
    interests: list[str]
    date_range: DateRange
    itinerary: list[Event] = Field(default_factory=list)
    itinerary_by_day: dict[str, CoverageEntry] = Field(default_factory=dict)
    total_items: int = 0
    events: int = 0
    activities: int = 0
    pipeline_stats: PipelineStats
    generated_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    request_id: Optional[str] = None

    def to_response(self) -> dict[str, Any]:
        """JSON body for the HTTP surface, with camelCase coverage flags."""
        return self.model_dump(mode="json", by_alias=True)
