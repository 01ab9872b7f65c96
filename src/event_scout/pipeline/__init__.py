"""Itinerary generation pipelines."""

from event_scout.pipeline.orchestrator import (
    NO_LINKS_MESSAGE,
    ItineraryOrchestrator,
    build_orchestrator,
    new_request_id,
)
from event_scout.pipeline.raw_tools import RawToolPipeline, organic_links

__all__ = [
    "ItineraryOrchestrator",
    "NO_LINKS_MESSAGE",
    "RawToolPipeline",
    "build_orchestrator",
    "new_request_id",
    "organic_links",
]
