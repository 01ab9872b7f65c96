"""Unit tests for the itinerary orchestrator."""

import json
from datetime import date

import pytest

from event_scout.exceptions import ConfigurationError
from event_scout.models import Event, ProgressPhase
from event_scout.pipeline import NO_LINKS_MESSAGE, ItineraryOrchestrator, build_orchestrator


def _scout_reply(*urls: str) -> dict:
    return {"links": [{"url": url, "title": "t"} for url in urls], "total_found": len(urls)}


def _explorer_reply(url: str) -> dict:
    return {
        "analyzed_links": 1,
        "valid_events": [
            {
                "name": "Jazz Jam",
                "type": "event",
                "category": "performance",
                "start_time": "2026-03-14T19:00:00",
                "end_time": "2026-03-14T21:00:00",
                "source": {"platform": "Luma", "url": url},
            },
            {
                "name": "Sketch Walk",
                "type": "activity",
                "category": "tour",
                "start_time": "2026-03-14T09:30:00",
                "end_time": "2026-03-14T11:00:00",
                "source": {"platform": "Luma", "url": url},
            },
        ],
        "rejected_links": [],
    }


class FakeRawPipeline:
    """Raw pipeline double returning fixed events."""

    def __init__(self, events: list[Event]) -> None:
        self.events = events
        self.calls = 0

    async def run(self, city, interests, start_date, end_date, on_progress=None, request_log=None):
        self.calls += 1
        return self.events


class TestItineraryOrchestrator:
    """Test suite for ItineraryOrchestrator."""

    @pytest.mark.asyncio
    async def test_scout_explorer_run(self, mock_settings, fake_client) -> None:
        """Test the full default pipeline with coverage and counts."""
        url = "https://lu.ma/jazz-jam-lisbon"
        fake_client.queue(_scout_reply(url), _explorer_reply(url))
        orchestrator = ItineraryOrchestrator(mock_settings, fake_client)
        progress = []

        result = await orchestrator.generate(
            "Lisbon",
            ["jazz"],
            date(2026, 3, 14),
            date(2026, 3, 14),
            on_progress=progress.append,
            request_id="req-1",
        )

        assert result.success is True
        assert result.request_id == "req-1"
        assert [e.name for e in result.itinerary] == ["Sketch Walk", "Jazz Jam"]
        assert result.total_items == 2
        assert result.events == 1
        assert result.activities == 1
        day = result.itinerary_by_day["2026-03-14"]
        assert day.count == 2
        assert day.has_morning and day.has_evening and not day.has_afternoon
        assert result.pipeline_stats.coverage_gaps == {"2026-03-14": ["afternoon"]}
        assert result.pipeline_stats.links_found == 1
        assert result.pipeline_stats.searches == 1

        percents = [e.percent for e in progress]
        assert percents == sorted(percents)
        assert progress[0].phase == ProgressPhase.PIPELINE_STARTED
        assert progress[-1].phase == ProgressPhase.COMPLETE
        assert progress[-1].percent == 100
        assert any(e.phase == ProgressPhase.COVERAGE and e.percent == 95 for e in progress)

    @pytest.mark.asyncio
    async def test_no_links_short_circuit(self, mock_settings, fake_client) -> None:
        """Test that zero Scout links skip the Explorer entirely."""
        fake_client.queue(_scout_reply(), _scout_reply())
        orchestrator = ItineraryOrchestrator(mock_settings, fake_client)

        result = await orchestrator.generate("Lisbon", ["jazz"], date(2026, 3, 14), date(2026, 3, 15))

        assert len(fake_client.calls) == 2
        assert result.success is True
        assert result.itinerary == []
        assert result.pipeline_stats.message == NO_LINKS_MESSAGE
        assert list(result.itinerary_by_day) == ["2026-03-14", "2026-03-15"]

    @pytest.mark.asyncio
    async def test_response_uses_camel_case_flags(self, mock_settings, fake_client) -> None:
        """Test the JSON response shape of coverage entries."""
        fake_client.queue(_scout_reply())
        orchestrator = ItineraryOrchestrator(mock_settings, fake_client)

        result = await orchestrator.generate("Lisbon", ["jazz"], date(2026, 3, 14), date(2026, 3, 14))
        body = result.to_response()

        assert body["itinerary_by_day"]["2026-03-14"]["hasMorning"] is False
        assert body["date_range"] == {"start": "2026-03-14", "end": "2026-03-14"}
        json.dumps(body)

    @pytest.mark.asyncio
    async def test_raw_tools_mode(self, mock_settings, fake_client) -> None:
        """Test that raw_tools mode runs the raw pipeline instead of Scout."""
        settings = mock_settings.model_copy(update={"pipeline_mode": "raw_tools"})
        event = Event(name="Jam", start_time="2026-03-14T14:00:00", end_time="2026-03-14T15:00:00")
        raw = FakeRawPipeline([event])
        orchestrator = ItineraryOrchestrator(settings, fake_client, raw_pipeline=raw)

        result = await orchestrator.generate("Lisbon", ["jazz"], date(2026, 3, 14), date(2026, 3, 14))

        assert raw.calls == 1
        assert fake_client.calls == []
        assert result.pipeline_stats.mode == "raw_tools"
        assert result.pipeline_stats.events_found == 1
        assert result.itinerary_by_day["2026-03-14"].has_afternoon is True

    @pytest.mark.asyncio
    async def test_raw_tools_requires_tool_server(self, mock_settings, fake_client) -> None:
        """Test that raw_tools mode without a pipeline is a configuration error."""
        settings = mock_settings.model_copy(update={"pipeline_mode": "raw_tools"})
        orchestrator = ItineraryOrchestrator(settings, fake_client)

        with pytest.raises(ConfigurationError):
            await orchestrator.generate("Lisbon", ["jazz"], date(2026, 3, 14), date(2026, 3, 14))

    @pytest.mark.asyncio
    async def test_request_log_artifacts(self, mock_settings, fake_client) -> None:
        """Test that per-request prompts, responses and snapshots are written."""
        settings = mock_settings.model_copy(update={"request_logging": True})
        url = "https://lu.ma/jazz-jam-lisbon"
        fake_client.queue(_scout_reply(url), _explorer_reply(url))
        orchestrator = ItineraryOrchestrator(settings, fake_client)

        await orchestrator.generate(
            "Lisbon", ["jazz"], date(2026, 3, 14), date(2026, 3, 14), request_id="abc123"
        )

        dirs = list(settings.log_dir.iterdir())
        assert len(dirs) == 1
        assert dirs[0].name.endswith("_abc123")
        names = {p.name for p in dirs[0].iterdir()}
        assert {"run.log", "scout.json", "explorer.json", "itinerary.json"} <= names
        assert any(n.startswith("prompt_scout_jazz") for n in names)
        assert "response_explorer_batch_1.txt" in names
        itinerary = json.loads((dirs[0] / "itinerary.json").read_text(encoding="utf-8"))
        assert itinerary["total_items"] == 2


class TestBuildOrchestrator:
    """Test suite for build_orchestrator."""

    def test_default_mode_has_no_tools(self, mock_settings, fake_client) -> None:
        """Test that the default mode wires no tool client."""
        orchestrator = build_orchestrator(mock_settings, fake_client)

        assert orchestrator.client is fake_client
        assert orchestrator.raw_pipeline is None
        assert orchestrator.tool_client is None

    def test_raw_mode_wires_tools(self, mock_settings, fake_client) -> None:
        """Test that raw_tools mode with a tool server builds the raw pipeline."""
        settings = mock_settings.model_copy(
            update={"pipeline_mode": "raw_tools", "mcp_url": "http://localhost:9000/sse"}
        )

        orchestrator = build_orchestrator(settings, fake_client)

        assert orchestrator.raw_pipeline is not None
        assert orchestrator.tool_client is not None
        assert orchestrator.raw_pipeline.search_invoker.tool_name == "search_engine"
        assert orchestrator.raw_pipeline.scrape_invoker.tool_name == "scrape_as_markdown"
