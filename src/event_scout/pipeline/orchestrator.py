"""Top-level itinerary generation.

Runs either Scout -> Explorer -> Coverage or the raw search/scrape pipeline
followed by Coverage, and composes the response. Component progress is
rescaled into one overall percentage.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

import structlog

from event_scout.config import Settings, get_settings
from event_scout.exceptions import ConfigurationError
from event_scout.explorer import LinkExplorer
from event_scout.gemini import GeminiClient, GenerationClient
from event_scout.models import (
    DateRange,
    Event,
    ItineraryResult,
    PipelineStats,
    ProgressEvent,
    ProgressPhase,
)
from event_scout.models.progress import ProgressCallback, emit, scaled
from event_scout.pipeline.raw_tools import RawToolPipeline
from event_scout.planner import analyze_coverage, coverage_gaps
from event_scout.run_log import RequestLogWriter, open_request_log
from event_scout.scout import LinkScout
from event_scout.tools import MCPToolClient, ResilientToolInvoker, ToolClient

logger = structlog.get_logger()

NO_LINKS_MESSAGE = "no links found"

SCOUT_BAND = (5, 40)
EXPLORER_BAND = (40, 90)
RAW_BAND = (5, 90)
COVERAGE_PERCENT = 95


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class ItineraryOrchestrator:
    """Generate an itinerary for a city, interests and date range.

    Args:
        settings: Application settings.
        client: Generation client shared by every model-calling component.
        scout: Optional Scout override.
        explorer: Optional Explorer override.
        raw_pipeline: Pipeline used in ``raw_tools`` mode.
        tool_client: Tool client owned by this orchestrator, closed by ``aclose``.
    """

    def __init__(
        self,
        settings: Settings,
        client: GenerationClient,
        scout: Optional[LinkScout] = None,
        explorer: Optional[LinkExplorer] = None,
        raw_pipeline: Optional[RawToolPipeline] = None,
        tool_client: Optional[ToolClient] = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.scout = scout or LinkScout(client, settings)
        self.explorer = explorer or LinkExplorer(client, settings)
        self.raw_pipeline = raw_pipeline
        self.tool_client = tool_client

    @property
    def mode(self) -> str:
        return self.settings.pipeline_mode

    async def generate(
        self,
        city: str,
        interests: list[str],
        start_date: date,
        end_date: date,
        on_progress: Optional[ProgressCallback] = None,
        request_id: Optional[str] = None,
    ) -> ItineraryResult:
        """Run the configured pipeline and build the itinerary response.

        Args:
            city: Target city.
            interests: Non-empty list of interests.
            start_date: First day (inclusive).
            end_date: Last day (inclusive).
            on_progress: Optional progress callback (overall percentages).
            request_id: Identifier for logs; generated when omitted.

        Returns:
            The composed ItineraryResult.

        Raises:
            ConfigurationError: If the model or tool server is not configured.
            EventScoutError: For other unrecoverable pipeline failures.
        """
        request_id = request_id or new_request_id()
        log = logger.bind(request_id=request_id, mode=self.mode)
        request_log = open_request_log(self.settings, request_id)
        request_log.append(
            f"Request {request_id}: city={city!r} interests={interests} "
            f"range={start_date.isoformat()}..{end_date.isoformat()} mode={self.mode}"
        )

        log.info(
            "pipeline_started",
            city=city,
            interests=interests,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.PIPELINE_STARTED,
                message=f"Planning {city} for {', '.join(interests)}",
                percent=0,
            ),
        )

        stats = PipelineStats(mode=self.mode)
        if self.mode == "raw_tools":
            events = await self._run_raw(
                city, interests, start_date, end_date, on_progress, request_log
            )
            stats.events_found = len(events)
        else:
            events = await self._run_scout_explorer(
                city, interests, start_date, end_date, on_progress, request_log, stats
            )

        result = self._compose(
            city, interests, start_date, end_date, events, stats, request_id, on_progress
        )
        request_log.snapshot("itinerary", result.to_response())
        request_log.append(f"Final itinerary: {result.total_items} items")

        log.info(
            "pipeline_complete",
            items=result.total_items,
            links=stats.links_found,
            rejected=stats.links_rejected,
            gaps=len(stats.coverage_gaps),
        )
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.COMPLETE,
                message=f"Itinerary ready with {result.total_items} items",
                percent=100,
            ),
        )
        return result

    async def _run_scout_explorer(
        self,
        city: str,
        interests: list[str],
        start_date: date,
        end_date: date,
        on_progress: Optional[ProgressCallback],
        request_log: RequestLogWriter,
        stats: PipelineStats,
    ) -> list[Event]:
        scout_result = await self.scout.scout_events(
            city,
            interests,
            start_date,
            end_date,
            on_progress=scaled(on_progress, *SCOUT_BAND),
            request_log=request_log,
        )
        request_log.snapshot("scout", scout_result)

        stats.links_found = scout_result.total_links_found
        stats.searches = len(scout_result.search_results)
        stats.failed_searches = scout_result.failed_searches

        if not scout_result.all_links:
            logger.info("pipeline_no_links", city=city, interests=interests)
            stats.message = NO_LINKS_MESSAGE
            return []

        explore_result = await self.explorer.explore_links(
            scout_result.all_links,
            city,
            on_progress=scaled(on_progress, *EXPLORER_BAND),
            request_log=request_log,
        )
        request_log.snapshot("explorer", explore_result)

        stats.links_analyzed = explore_result.total_analyzed
        stats.events_found = explore_result.total_events
        stats.links_rejected = len(explore_result.rejected)
        stats.batches = explore_result.batches
        stats.failed_batches = explore_result.failed_batches
        return explore_result.events

    async def _run_raw(
        self,
        city: str,
        interests: list[str],
        start_date: date,
        end_date: date,
        on_progress: Optional[ProgressCallback],
        request_log: RequestLogWriter,
    ) -> list[Event]:
        if self.raw_pipeline is None:
            raise ConfigurationError(
                "raw_tools mode needs a tool server; set EVENT_SCOUT_MCP_URL "
                "or EVENT_SCOUT_BRIGHTDATA_API_KEY"
            )
        return await self.raw_pipeline.run(
            city,
            interests,
            start_date,
            end_date,
            on_progress=scaled(on_progress, *RAW_BAND),
            request_log=request_log,
        )

    def _compose(
        self,
        city: str,
        interests: list[str],
        start_date: date,
        end_date: date,
        events: list[Event],
        stats: PipelineStats,
        request_id: str,
        on_progress: Optional[ProgressCallback],
    ) -> ItineraryResult:
        coverage = analyze_coverage(events, start_date, end_date)
        stats.coverage_gaps = coverage_gaps(coverage)
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.COVERAGE,
                message=f"{len(stats.coverage_gaps)} days with open time slots",
                percent=COVERAGE_PERCENT,
            ),
        )

        return ItineraryResult(
            success=True,
            city=city,
            interests=interests,
            date_range=DateRange(start=start_date, end=end_date),
            itinerary=events,
            itinerary_by_day=coverage,
            total_items=len(events),
            events=sum(1 for e in events if e.type == "event"),
            activities=sum(1 for e in events if e.type == "activity"),
            pipeline_stats=stats,
            request_id=request_id,
        )

    async def aclose(self) -> None:
        if self.tool_client is not None:
            await self.tool_client.close()


def build_orchestrator(
    settings: Optional[Settings] = None,
    client: Optional[GenerationClient] = None,
) -> ItineraryOrchestrator:
    """Wire an orchestrator from settings.

    The MCP tool client is only created in ``raw_tools`` mode and connects
    lazily on first use.
    """
    settings = settings or get_settings()
    client = client or GeminiClient(settings)

    raw_pipeline = None
    tool_client = None
    if settings.pipeline_mode == "raw_tools" and settings.mcp_sse_url:
        tool_client = MCPToolClient(settings.mcp_sse_url)
        raw_pipeline = RawToolPipeline(
            client,
            ResilientToolInvoker(tool_client, settings.raw_search_tool),
            ResilientToolInvoker(tool_client, settings.raw_scrape_tool),
            settings,
        )

    return ItineraryOrchestrator(
        settings,
        client,
        raw_pipeline=raw_pipeline,
        tool_client=tool_client,
    )
