"""Link Scout: discovery of candidate event pages.

One search-augmented call is issued per (interest, calendar day). The sweep
is strictly sequential with a fixed pause between calls. A failing call
degrades to an empty result for that pair instead of aborting the sweep.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_scout.config import Settings
from event_scout.exceptions import ConfigurationError, EventScoutError, ExtractionError
from event_scout.extraction import extract_json
from event_scout.gemini import GenerationClient
from event_scout.models import Link, ProgressEvent, ProgressPhase, ScoutResult, SearchResult
from event_scout.models.progress import ProgressCallback, emit, fraction
from event_scout.run_log import NullRequestLog, RequestLogWriter
from event_scout.scout.prompt import build_scout_prompt, generate_search_queries
from event_scout.utils import iter_dates, pause

logger = structlog.get_logger()


def dedupe_links(links: list[Link]) -> list[Link]:
    """Keep the first link seen for each URL, preserving order."""
    seen: set[str] = set()
    unique: list[Link] = []
    for link in links:
        if link.url in seen:
            continue
        seen.add(link.url)
        unique.append(link)
    return unique


def _parse_links(raw_links: Any, *, limit: int) -> list[Link]:
    if not isinstance(raw_links, list):
        return []

    links: list[Link] = []
    for item in raw_links:
        if not isinstance(item, dict):
            continue
        try:
            links.append(Link.model_validate(item))
        except PydanticValidationError as exc:
            logger.debug("scout_link_skipped", url=item.get("url"), error=str(exc))
        if len(links) >= limit:
            break
    return links


class LinkScout:
    """Turns (city, interests, date range) into deduplicated candidate links."""

    def __init__(self, client: GenerationClient, settings: Optional[Settings] = None) -> None:
        from event_scout.config import get_settings

        self.client = client
        self.settings = settings or get_settings()

    async def search_for_interest(
        self,
        interest: str,
        city: str,
        day: date,
        request_log: Optional[RequestLogWriter] = None,
    ) -> SearchResult:
        """Search event links for one interest on one day.

        Never raises for upstream or parsing failures; those are reported in
        the returned ``SearchResult``.
        """
        request_log = request_log or NullRequestLog()
        queries = generate_search_queries(interest, city, day)
        prompt = build_scout_prompt(
            interest=interest,
            city=city,
            day=day,
            queries=queries,
            max_links=self.settings.scout_links_per_search,
        )
        step = f"scout_{interest}_{day.isoformat()}"
        request_log.log_prompt(step, prompt)

        logger.info("scout_search_started", interest=interest, city=city, date=day.isoformat())

        try:
            result = await self.client.generate(
                prompt,
                search=True,
                temperature=self.settings.scout_temperature,
                max_output_tokens=self.settings.scout_max_output_tokens,
            )
            request_log.log_response(step, result.text)

            payload = extract_json(result.text)
            if not isinstance(payload, dict):
                raise ExtractionError("Scout response was not a JSON object")
        except ConfigurationError:
            raise
        except EventScoutError as exc:
            logger.warning(
                "scout_search_failed",
                interest=interest,
                date=day.isoformat(),
                error=str(exc),
            )
            request_log.append(f"Scout search failed for {interest!r} on {day}: {exc}")
            return SearchResult(
                interest=interest,
                city=city,
                date=day,
                success=False,
                queries_used=queries,
                error=str(exc),
            )

        links = _parse_links(payload.get("links"), limit=self.settings.scout_links_per_search)
        used = payload.get("queries_used")
        queries_used = [str(q) for q in used] if isinstance(used, list) and used else queries

        logger.info(
            "scout_search_complete",
            interest=interest,
            date=day.isoformat(),
            links=len(links),
        )
        return SearchResult(
            interest=interest,
            city=city,
            date=day,
            links=links,
            queries_used=queries_used,
        )

    async def scout_events(
        self,
        city: str,
        interests: list[str],
        start_date: date,
        end_date: date,
        on_progress: Optional[ProgressCallback] = None,
        request_log: Optional[RequestLogWriter] = None,
    ) -> ScoutResult:
        """Search every interest on every day of the range and merge the links.

        Args:
            city: Target city.
            interests: Interests to search.
            start_date: First day (inclusive).
            end_date: Last day (inclusive).
            on_progress: Optional progress callback.
            request_log: Optional per-request log.

        Returns:
            All unique links (first-seen wins) and per-search diagnostics.
        """
        days = iter_dates(start_date, end_date)
        pairs = [(interest, day) for interest in interests for day in days]
        total = len(pairs)

        logger.info(
            "scout_started",
            city=city,
            interests=interests,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            searches=total,
        )
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.SCOUT_STARTED,
                message=f"Searching {len(interests)} interests across {len(days)} days",
                percent=0,
                current=0,
                total=total,
            ),
        )

        search_results: list[SearchResult] = []
        collected: list[Link] = []

        for index, (interest, day) in enumerate(pairs, start=1):
            result = await self.search_for_interest(interest, city, day, request_log)
            search_results.append(result)

            searched_at = datetime.now(timezone.utc)
            for link in result.links:
                collected.append(
                    link.model_copy(
                        update={"interest": interest, "date": day, "searched_at": searched_at}
                    )
                )

            emit(
                on_progress,
                ProgressEvent(
                    phase=ProgressPhase.SCOUT_SEARCH,
                    message=f'Found {len(result.links)} links for "{interest}" on {day.isoformat()}',
                    percent=fraction(index, total),
                    current=index,
                    total=total,
                ),
            )

            if index < total:
                await pause(self.settings.scout_delay_seconds)

        unique = dedupe_links(collected)
        scout_result = ScoutResult(
            all_links=unique,
            total_links_found=len(unique),
            search_results=search_results,
        )

        logger.info(
            "scout_complete",
            unique_links=len(unique),
            raw_links=len(collected),
            failed_searches=scout_result.failed_searches,
        )
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.SCOUT_COMPLETE,
                message=f"Scout found {len(unique)} unique links",
                percent=100,
                current=total,
                total=total,
            ),
        )
        return scout_result
