"""Helpers for sorting, grouping and rendering an itinerary."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any

from event_scout.models import Event
from event_scout.models.event import minutes_between, wall_clock

GAP_THRESHOLD_MINUTES = 60


def sort_by_time(events: list[Event]) -> list[Event]:
    return sorted(events, key=lambda e: wall_clock(e.start_time))


def group_by_date(events: list[Event]) -> dict[str, list[Event]]:
    """Group events by the ISO date of their local start time."""
    grouped: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        grouped[event.start_time.date().isoformat()].append(event)
    return dict(grouped)


def group_by_category(events: list[Event]) -> dict[str, list[Event]]:
    grouped: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        grouped[event.category or "other"].append(event)
    return dict(grouped)


def remove_duplicates(events: list[Event]) -> list[Event]:
    """Drop later events sharing a name and start time with an earlier one."""
    seen = set()
    unique = []
    for event in events:
        if event.dedupe_key in seen:
            continue
        seen.add(event.dedupe_key)
        unique.append(event)
    return unique


def filter_by_date_range(events: list[Event], start_date: date, end_date: date) -> list[Event]:
    return [e for e in events if start_date <= e.start_time.date() <= end_date]


def find_schedule_gaps(day_events: list[Event]) -> list[dict[str, Any]]:
    """Find free stretches longer than an hour between consecutive events.

    Args:
        day_events: Events of a single day, in any order.

    Returns:
        One dict per gap with the neighbouring event names, the gap
        boundaries and its length in minutes.
    """
    if len(day_events) < 2:
        return []

    ordered = sort_by_time(day_events)
    gaps = []
    for current, following in zip(ordered, ordered[1:]):
        minutes = minutes_between(current.end_time, following.start_time)
        if minutes > GAP_THRESHOLD_MINUTES:
            gaps.append(
                {
                    "after_event": current.name,
                    "before_event": following.name,
                    "start": current.end_time,
                    "end": following.start_time,
                    "duration_minutes": minutes,
                }
            )
    return gaps


def get_time_distribution(events: list[Event]) -> dict[str, list[Event]]:
    """Distribute events over a four-way view of the day.

    This view (morning 6-12, afternoon 12-17, evening 17-21, night otherwise)
    is for display only and is independent of the coverage bands.
    """
    distribution: dict[str, list[Event]] = {
        "morning": [],
        "afternoon": [],
        "evening": [],
        "night": [],
    }
    for event in events:
        hour = event.start_time.hour
        if 6 <= hour < 12:
            distribution["morning"].append(event)
        elif 12 <= hour < 17:
            distribution["afternoon"].append(event)
        elif 17 <= hour < 21:
            distribution["evening"].append(event)
        else:
            distribution["night"].append(event)
    return distribution


def calculate_total_duration(events: list[Event]) -> int:
    return sum(e.duration_minutes for e in events)


def format_itinerary(events: list[Event]) -> str:
    """Render events as a plain-text, day-by-day schedule."""
    lines: list[str] = []
    for day, day_events in sorted(group_by_date(events).items()):
        heading = date.fromisoformat(day).strftime("%A, %B %d")
        lines.append("")
        lines.append(heading)
        lines.append("-" * 40)
        for event in sort_by_time(day_events):
            lines.append(f"  {event.start_time:%H:%M} - {event.name}")
            lines.append(f"          @ {event.location.venue or 'TBD'}")
    return "\n".join(lines) + ("\n" if lines else "")
