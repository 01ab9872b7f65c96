"""Per-day coverage of the morning/afternoon/evening bands.

Band boundaries use the event's local start hour: morning 8-12,
afternoon 12-17, evening from 17. Hours before 8 fall in no band.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence, Union

import structlog

from event_scout.models import CoverageEntry, Event
from event_scout.utils import iter_dates

logger = structlog.get_logger()

MORNING_START = 8
AFTERNOON_START = 12
EVENING_START = 17

BANDS = ("morning", "afternoon", "evening")

EventLike = Union[Event, Mapping[str, Any]]


def event_start(event: EventLike) -> Optional[datetime]:
    """Local start time of ``event``, or None when missing or malformed."""
    if isinstance(event, Event):
        return event.start_time
    raw = event.get("start_time")
    if isinstance(raw, datetime):
        return raw
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        return None


def band_for_hour(hour: int) -> Optional[str]:
    if hour >= EVENING_START:
        return "evening"
    if hour >= AFTERNOON_START:
        return "afternoon"
    if hour >= MORNING_START:
        return "morning"
    return None


def analyze_coverage(
    events: Sequence[EventLike],
    start_date: date,
    end_date: date,
) -> dict[str, CoverageEntry]:
    """Bucket events by calendar day and time-of-day band.

    Every day of the range gets an entry, including days without events.
    Events with an unusable ``start_time`` are left out of the buckets (the
    caller's flat list is untouched); events outside the range are ignored.

    Args:
        events: Events as models or mappings.
        start_date: First day (inclusive).
        end_date: Last day (inclusive).

    Returns:
        Mapping of ISO date to CoverageEntry, in date order.
    """
    coverage: dict[str, CoverageEntry] = {
        day.isoformat(): CoverageEntry() for day in iter_dates(start_date, end_date)
    }

    for event in events:
        start = event_start(event)
        if start is None:
            logger.debug("coverage_event_skipped", reason="unparseable start_time")
            continue

        entry = coverage.get(start.date().isoformat())
        if entry is None:
            continue

        if isinstance(event, Event):
            entry.events.append(event)
        else:
            try:
                entry.events.append(Event.model_validate(dict(event)))
            except ValueError:
                logger.debug("coverage_event_not_listed", name=event.get("name"))
        entry.count += 1

        band = band_for_hour(start.hour)
        if band == "morning":
            entry.has_morning = True
        elif band == "afternoon":
            entry.has_afternoon = True
        elif band == "evening":
            entry.has_evening = True

    return coverage


def coverage_gaps(coverage: Mapping[str, CoverageEntry]) -> dict[str, list[str]]:
    """Bands without any event, per day; fully covered days are omitted."""
    gaps: dict[str, list[str]] = {}
    for day, entry in coverage.items():
        flags = {
            "morning": entry.has_morning,
            "afternoon": entry.has_afternoon,
            "evening": entry.has_evening,
        }
        missing = [band for band in BANDS if not flags[band]]
        if missing:
            gaps[day] = missing
    return gaps
