"""Structured progress reporting for the discovery pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field


class ProgressPhase(str, Enum):
    PIPELINE_STARTED = "pipeline_started"
    SCOUT_STARTED = "scout_started"
    SCOUT_SEARCH = "scout_search"
    SCOUT_COMPLETE = "scout_complete"
    EXPLORER_STARTED = "explorer_started"
    EXPLORER_BATCH = "explorer_batch"
    EXPLORER_COMPLETE = "explorer_complete"
    COVERAGE = "coverage"
    COMPLETE = "complete"


class ProgressEvent(BaseModel):
    """One progress milestone.

    ``percent`` is relative to whoever emitted the event; the orchestrator
    rescales component progress into the overall run.
    """

    phase: ProgressPhase
    message: str
    percent: int = Field(ge=0, le=100)
    current: Optional[int] = None
    total: Optional[int] = None


ProgressCallback = Callable[[ProgressEvent], None]


def emit(callback: Optional[ProgressCallback], event: ProgressEvent) -> None:
    if callback is not None:
        callback(event)


def scaled(callback: Optional[ProgressCallback], low: int, high: int) -> Optional[ProgressCallback]:
    """Wrap ``callback`` so component percentages map onto ``[low, high]``."""
    if callback is None:
        return None

    def _forward(event: ProgressEvent) -> None:
        percent = low + round((high - low) * event.percent / 100)
        callback(event.model_copy(update={"percent": percent}))

    return _forward


def fraction(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, round(100 * done / total))
