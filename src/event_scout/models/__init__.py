"""Data models for Event Scout.

This module contains Pydantic models for data validation and serialization.
"""

from event_scout.models.edit import EditIntent, EditOperation, EditRequest, EditResult
from event_scout.models.event import (
    PROVENANCE_FIELDS,
    Coordinates,
    Event,
    ExtractedEvent,
    Location,
    Pricing,
    Source,
)
from event_scout.models.link import Link, LinkConfidence, RejectedLink
from event_scout.models.progress import ProgressCallback, ProgressEvent, ProgressPhase
from event_scout.models.results import (
    BatchAnalysis,
    CoverageEntry,
    DateRange,
    ExploreResult,
    ItineraryResult,
    PipelineStats,
    ScoutResult,
    SearchResult,
)

__all__ = [
    "BatchAnalysis",
    "Coordinates",
    "CoverageEntry",
    "DateRange",
    "EditIntent",
    "EditOperation",
    "EditRequest",
    "EditResult",
    "Event",
    "ExploreResult",
    "ExtractedEvent",
    "ItineraryResult",
    "Link",
    "LinkConfidence",
    "Location",
    "PROVENANCE_FIELDS",
    "PipelineStats",
    "Pricing",
    "ProgressCallback",
    "ProgressEvent",
    "ProgressPhase",
    "RejectedLink",
    "ScoutResult",
    "SearchResult",
    "Source",
]
