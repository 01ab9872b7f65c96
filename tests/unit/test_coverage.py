"""Unit tests for coverage analysis."""

from datetime import date

from event_scout.models import Event
from event_scout.planner import analyze_coverage, band_for_hour, coverage_gaps


def _event(name: str, start: str, end: str) -> Event:
    return Event(name=name, start_time=start, end_time=end)


class TestAnalyzeCoverage:
    """Test suite for analyze_coverage."""

    def test_all_bands_covered(self) -> None:
        """Test that 09:30, 14:00 and 19:00 events fill every band."""
        events = [
            _event("Breakfast Talk", "2026-03-14T09:30:00", "2026-03-14T10:30:00"),
            _event("Workshop", "2026-03-14T14:00:00", "2026-03-14T16:00:00"),
            _event("Concert", "2026-03-14T19:00:00", "2026-03-14T21:00:00"),
        ]

        coverage = analyze_coverage(events, date(2026, 3, 14), date(2026, 3, 14))

        entry = coverage["2026-03-14"]
        assert entry.count == 3
        assert entry.has_morning is True
        assert entry.has_afternoon is True
        assert entry.has_evening is True
        assert [e.name for e in entry.events] == ["Breakfast Talk", "Workshop", "Concert"]

    def test_days_without_events_present(self) -> None:
        """Test that every day of the range gets an entry, in order."""
        events = [_event("Concert", "2026-03-15T19:00:00", "2026-03-15T21:00:00")]

        coverage = analyze_coverage(events, date(2026, 3, 14), date(2026, 3, 16))

        assert list(coverage) == ["2026-03-14", "2026-03-15", "2026-03-16"]
        assert coverage["2026-03-14"].count == 0
        assert coverage["2026-03-14"].has_evening is False
        assert coverage["2026-03-15"].has_evening is True

    def test_band_boundaries(self) -> None:
        """Test the hour boundaries of each band."""
        assert band_for_hour(7) is None
        assert band_for_hour(8) == "morning"
        assert band_for_hour(11) == "morning"
        assert band_for_hour(12) == "afternoon"
        assert band_for_hour(16) == "afternoon"
        assert band_for_hour(17) == "evening"
        assert band_for_hour(23) == "evening"

    def test_early_event_counts_without_band(self) -> None:
        """Test that an event before 08:00 is counted but sets no band."""
        events = [_event("Sunrise Run", "2026-03-14T06:30:00", "2026-03-14T07:30:00")]

        entry = analyze_coverage(events, date(2026, 3, 14), date(2026, 3, 14))["2026-03-14"]

        assert entry.count == 1
        assert not (entry.has_morning or entry.has_afternoon or entry.has_evening)

    def test_mappings_and_malformed_start(self) -> None:
        """Test that mappings are accepted and malformed start times skipped."""
        events = [
            {"name": "Gallery Talk", "start_time": "2026-03-14T11:00:00", "end_time": "2026-03-14T12:00:00"},
            {"name": "Broken", "start_time": "sometime friday"},
            {"name": "No Time"},
        ]

        entry = analyze_coverage(events, date(2026, 3, 14), date(2026, 3, 14))["2026-03-14"]

        assert entry.count == 1
        assert entry.has_morning is True
        assert entry.events[0].name == "Gallery Talk"
        assert len(events) == 3

    def test_out_of_range_ignored(self) -> None:
        """Test that events outside the range are not bucketed."""
        events = [_event("Later", "2026-04-01T19:00:00", "2026-04-01T20:00:00")]

        coverage = analyze_coverage(events, date(2026, 3, 14), date(2026, 3, 14))

        assert coverage["2026-03-14"].count == 0

    def test_inverted_range_is_empty(self) -> None:
        """Test that an inverted date range yields no days."""
        assert analyze_coverage([], date(2026, 3, 15), date(2026, 3, 14)) == {}


class TestCoverageGaps:
    """Test suite for coverage_gaps."""

    def test_gaps_listed_per_day(self) -> None:
        """Test that only uncovered bands are reported and full days omitted."""
        events = [
            _event("Breakfast Talk", "2026-03-14T09:30:00", "2026-03-14T10:30:00"),
            _event("Workshop", "2026-03-14T14:00:00", "2026-03-14T16:00:00"),
            _event("Concert", "2026-03-14T19:00:00", "2026-03-14T21:00:00"),
            _event("Matinee", "2026-03-15T13:00:00", "2026-03-15T15:00:00"),
        ]
        coverage = analyze_coverage(events, date(2026, 3, 14), date(2026, 3, 15))

        assert coverage_gaps(coverage) == {"2026-03-15": ["morning", "evening"]}
