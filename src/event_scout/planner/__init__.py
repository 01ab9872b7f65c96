"""Itinerary coverage analysis and schedule helpers."""

from event_scout.planner.coverage import analyze_coverage, band_for_hour, coverage_gaps
from event_scout.planner.schedule import (
    calculate_total_duration,
    filter_by_date_range,
    find_schedule_gaps,
    format_itinerary,
    get_time_distribution,
    group_by_category,
    group_by_date,
    remove_duplicates,
    sort_by_time,
)

__all__ = [
    "analyze_coverage",
    "band_for_hour",
    "calculate_total_duration",
    "coverage_gaps",
    "filter_by_date_range",
    "find_schedule_gaps",
    "format_itinerary",
    "get_time_distribution",
    "group_by_category",
    "group_by_date",
    "remove_duplicates",
    "sort_by_time",
]
