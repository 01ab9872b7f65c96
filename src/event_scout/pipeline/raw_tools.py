"""Itinerary discovery through raw search and scrape tools.

The alternate path: search results and scraped pages are fetched through an
MCP tool server and handed to the model in one extraction call per interest.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_scout.config import Settings
from event_scout.exceptions import ConfigurationError
from event_scout.explorer.explorer import dedupe_events, sort_events
from event_scout.explorer.policy import apply_url_policy, fill_missing_end_time
from event_scout.extraction import extract_json, normalize_itinerary_payload
from event_scout.gemini import GenerationClient
from event_scout.models import Event, ProgressEvent, ProgressPhase
from event_scout.models.progress import ProgressCallback, emit, fraction
from event_scout.pipeline.prompt import build_itinerary_prompt, build_search_query
from event_scout.run_log import NullRequestLog, RequestLogWriter
from event_scout.tools import ResilientToolInvoker

logger = structlog.get_logger()


def organic_links(search_text: str, limit: int) -> list[str]:
    """Pull result URLs out of a search tool reply.

    Raises:
        ExtractionError: If the reply contains no JSON.
    """
    payload = extract_json(search_text)
    organic = payload.get("organic") if isinstance(payload, dict) else None
    links: list[str] = []
    for item in organic if isinstance(organic, list) else []:
        url = item.get("link") if isinstance(item, dict) else None
        if isinstance(url, str) and url.startswith(("http://", "https://")) and url not in links:
            links.append(url)
        if len(links) >= limit:
            break
    return links


class RawToolPipeline:
    """Search, scrape and extract events for each interest in turn."""

    def __init__(
        self,
        client: GenerationClient,
        search_invoker: ResilientToolInvoker,
        scrape_invoker: ResilientToolInvoker,
        settings: Optional[Settings] = None,
    ) -> None:
        from event_scout.config import get_settings

        self.client = client
        self.search_invoker = search_invoker
        self.scrape_invoker = scrape_invoker
        self.settings = settings or get_settings()

    async def _scrape_pages(self, urls: list[str]) -> list[tuple[str, str]]:
        limit = self.settings.raw_page_char_limit
        pages: list[tuple[str, str]] = []
        for url in urls:
            try:
                text = await self.scrape_invoker.invoke(
                    {"url": url}, timeout=self.settings.raw_tool_timeout_seconds
                )
            except Exception as e:
                logger.warning("raw_scrape_failed", url=url, error=str(e))
                continue
            if text:
                pages.append((url, str(text)[:limit]))
        return pages

    def _parse_events(self, text: str, allowed_urls: set[str]) -> list[Event]:
        payload = extract_json(text, wrap_array=True)
        events: list[Event] = []
        for raw in normalize_itinerary_payload(payload):
            try:
                raw = apply_url_policy(raw, allowed_urls)
                events.append(Event.model_validate(fill_missing_end_time(raw)))
            except (ValueError, PydanticValidationError) as exc:
                logger.info("raw_event_skipped", name=raw.get("name"), error=str(exc))
        return events

    async def run_interest(
        self,
        interest: str,
        city: str,
        start_date: date,
        end_date: date,
        request_log: Optional[RequestLogWriter] = None,
    ) -> list[Event]:
        """Discover events for a single interest.

        Search failures are raised to the caller; scrape failures skip the page.
        """
        request_log = request_log or NullRequestLog()
        query = build_search_query(interest, city, start_date, end_date)

        logger.info("raw_search_started", interest=interest, query=query)
        search_text = await self.search_invoker.invoke(
            {"query": query, "engine": "google"},
            timeout=self.settings.raw_tool_timeout_seconds,
        )
        urls = organic_links(str(search_text), self.settings.raw_max_pages_per_interest)
        request_log.append(f"Search {query!r} returned {len(urls)} links")

        pages = await self._scrape_pages(urls)
        if not pages:
            logger.info("raw_no_pages", interest=interest)
            return []

        step = f"raw_{interest}"
        prompt = build_itinerary_prompt(
            city=city,
            interest=interest,
            start_date=start_date,
            end_date=end_date,
            pages=pages,
        )
        request_log.log_prompt(step, prompt)
        result = await self.client.generate(
            prompt,
            search=False,
            temperature=self.settings.explorer_temperature,
            max_output_tokens=self.settings.explorer_max_output_tokens,
        )
        request_log.log_response(step, result.text)

        events = self._parse_events(result.text, set(urls))
        logger.info("raw_interest_complete", interest=interest, pages=len(pages), events=len(events))
        return events

    async def run(
        self,
        city: str,
        interests: list[str],
        start_date: date,
        end_date: date,
        on_progress: Optional[ProgressCallback] = None,
        request_log: Optional[RequestLogWriter] = None,
    ) -> list[Event]:
        """Run every interest in sequence and merge the events.

        Returns:
            Deduplicated events sorted by local start time.
        """
        total = len(interests)
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.SCOUT_STARTED,
                message=f"Searching the web for {total} interests",
                percent=0,
                current=0,
                total=total,
            ),
        )

        collected: list[Event] = []
        for index, interest in enumerate(interests, start=1):
            try:
                found = await self.run_interest(
                    interest, city, start_date, end_date, request_log
                )
            except ConfigurationError:
                raise
            except Exception as exc:
                logger.warning("raw_interest_failed", interest=interest, error=str(exc))
                if request_log is not None:
                    request_log.append(f"Raw pipeline failed for {interest!r}: {exc}")
                found = []
            collected.extend(found)

            emit(
                on_progress,
                ProgressEvent(
                    phase=ProgressPhase.SCOUT_SEARCH,
                    message=f'Found {len(found)} events for "{interest}"',
                    percent=fraction(index, total),
                    current=index,
                    total=total,
                ),
            )

        events = sort_events(dedupe_events(collected))
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.EXPLORER_COMPLETE,
                message=f"Found {len(events)} events",
                percent=100,
                current=total,
                total=total,
            ),
        )
        return events
