"""Link Explorer: verification of candidate links into scheduled events.

Links are described to the model in fixed-size batches, one search-augmented
call per batch, strictly sequential with a pause between batches. A batch
that fails as a whole turns every one of its links into a RejectedLink so
nothing is silently lost.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_scout.config import Settings
from event_scout.exceptions import ConfigurationError, EventScoutError, ExtractionError
from event_scout.explorer.policy import apply_url_policy, fill_missing_end_time, source_url_of
from event_scout.explorer.prompt import build_explorer_prompt
from event_scout.extraction import extract_json
from event_scout.gemini import GenerationClient
from event_scout.models import (
    BatchAnalysis,
    Event,
    ExploreResult,
    ExtractedEvent,
    Link,
    ProgressEvent,
    ProgressPhase,
    RejectedLink,
)
from event_scout.models.event import wall_clock
from event_scout.models.progress import ProgressCallback, emit, fraction
from event_scout.run_log import NullRequestLog, RequestLogWriter
from event_scout.utils import chunked, pause

logger = structlog.get_logger()


def chunk_links(links: list[Link], size: int) -> list[list[Link]]:
    return list(chunked(links, size))


def dedupe_events(events: list[Event]) -> list[Event]:
    """Keep the first event for each (name, start_time) pair."""
    seen: set[tuple[Any, ...]] = set()
    unique: list[Event] = []
    for event in events:
        key = event.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)
    return unique


def sort_events(events: list[Event]) -> list[Event]:
    """Sort ascending by local start time (stable for equal times)."""
    return sorted(events, key=lambda e: wall_clock(e.start_time))


def _validate_event(raw: dict[str, Any], allowed_urls: set[str]) -> ExtractedEvent:
    """Apply URL policy and schema validation to one model-returned event.

    Raises:
        ValueError: If the event violates the URL policy or the schema.
    """
    raw = apply_url_policy(raw, allowed_urls)
    return ExtractedEvent.model_validate(fill_missing_end_time(raw))


def _rejection_reason(exc: Exception) -> str:
    if isinstance(exc, PydanticValidationError):
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first.get("loc", ())) or "event"
        return f"invalid event record: {where}: {first.get('msg')}"
    return str(exc) or "invalid event record"


def _parse_rejections(raw_rejected: Any) -> list[RejectedLink]:
    if not isinstance(raw_rejected, list):
        return []
    rejected: list[RejectedLink] = []
    for item in raw_rejected:
        if isinstance(item, dict):
            url = item.get("url")
            rejected.append(
                RejectedLink(url=str(url) if url is not None else None, reason=item.get("reason"))
            )
        elif isinstance(item, str):
            rejected.append(RejectedLink(url=item, reason=None))
    return rejected


class LinkExplorer:
    """Classifies Scout links into validated events or rejections."""

    def __init__(self, client: GenerationClient, settings: Optional[Settings] = None) -> None:
        from event_scout.config import get_settings

        self.client = client
        self.settings = settings or get_settings()

    async def analyze_batch(
        self,
        batch: list[Link],
        city: str,
        request_log: Optional[RequestLogWriter] = None,
        step: str = "explorer_batch",
    ) -> BatchAnalysis:
        """Analyze one batch of links in a single model call.

        Never raises for upstream or parsing failures; a failed batch comes
        back with every link rejected under the failure reason.
        """
        request_log = request_log or NullRequestLog()
        prompt = build_explorer_prompt(batch, city)
        request_log.log_prompt(step, prompt)

        try:
            result = await self.client.generate(
                prompt,
                search=True,
                temperature=self.settings.explorer_temperature,
                max_output_tokens=self.settings.explorer_max_output_tokens,
            )
            request_log.log_response(step, result.text)

            payload = extract_json(result.text)
            if not isinstance(payload, dict):
                raise ExtractionError("Explorer response was not a JSON object")
        except ConfigurationError:
            raise
        except EventScoutError as exc:
            logger.warning("explorer_batch_failed", links=len(batch), error=str(exc))
            request_log.append(f"Explorer batch failed ({len(batch)} links): {exc}")
            return BatchAnalysis(
                success=False,
                rejected=[RejectedLink(url=link.url, reason=str(exc)) for link in batch],
                error=str(exc),
            )

        allowed_urls = {link.url for link in batch}
        events: list[Event] = []
        rejected = _parse_rejections(payload.get("rejected_links"))

        raw_events = payload.get("valid_events")
        for raw in raw_events if isinstance(raw_events, list) else []:
            if not isinstance(raw, dict):
                continue
            try:
                events.append(_validate_event(raw, allowed_urls))
            except (ValueError, PydanticValidationError) as exc:
                reason = _rejection_reason(exc)
                logger.info("explorer_event_rejected", name=raw.get("name"), reason=reason)
                rejected.append(RejectedLink(url=source_url_of(raw), reason=reason))

        analyzed = payload.get("analyzed_links")
        if not isinstance(analyzed, int) or isinstance(analyzed, bool) or analyzed <= 0:
            analyzed = len(batch)

        return BatchAnalysis(events=events, rejected=rejected, analyzed=analyzed)

    async def analyze_link(self, link: Link, city: str) -> BatchAnalysis:
        """Analyze a single link on its own."""
        return await self.analyze_batch([link], city, step="explorer_single")

    async def explore_links(
        self,
        links: list[Link],
        city: str,
        on_progress: Optional[ProgressCallback] = None,
        request_log: Optional[RequestLogWriter] = None,
    ) -> ExploreResult:
        """Verify every link and return deduplicated, time-sorted events.

        Args:
            links: Links from the Scout phase.
            city: Target city (timezone context for the model).
            on_progress: Optional progress callback.
            request_log: Optional per-request log.

        Returns:
            Events without provenance fields, plus rejections and counters.
        """
        if not links:
            logger.info("explorer_no_links")
            return ExploreResult()

        batch_size = self.settings.explorer_batch_size
        batches = chunk_links(links, batch_size)
        total = len(batches)

        logger.info("explorer_started", links=len(links), batches=total, batch_size=batch_size)
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.EXPLORER_STARTED,
                message=f"Analyzing {len(links)} links in {total} batches",
                percent=0,
                current=0,
                total=total,
            ),
        )

        collected: list[Event] = []
        rejected: list[RejectedLink] = []
        total_analyzed = 0
        failed_batches = 0

        for index, batch in enumerate(batches, start=1):
            logger.info("explorer_batch_started", batch=index, batches=total, links=len(batch))
            analysis = await self.analyze_batch(
                batch, city, request_log, step=f"explorer_batch_{index}"
            )

            rejected.extend(analysis.rejected)
            if analysis.success:
                collected.extend(analysis.events)
                total_analyzed += analysis.analyzed
                message = f"Batch {index}/{total}: {len(analysis.events)} valid events"
            else:
                failed_batches += 1
                message = f"Batch {index}/{total} failed: {analysis.error}"

            emit(
                on_progress,
                ProgressEvent(
                    phase=ProgressPhase.EXPLORER_BATCH,
                    message=message,
                    percent=fraction(index, total),
                    current=index,
                    total=total,
                ),
            )

            if index < total:
                await pause(self.settings.explorer_delay_seconds)

        if request_log is not None:
            request_log.snapshot(
                "explorer_raw_events",
                [event.model_dump(mode="json") for event in collected],
            )

        events = [
            e.strip_provenance() if isinstance(e, ExtractedEvent) else e
            for e in sort_events(dedupe_events(collected))
        ]

        result = ExploreResult(
            events=events,
            total_analyzed=total_analyzed,
            total_events=len(events),
            rejected=rejected,
            batches=total,
            failed_batches=failed_batches,
        )

        logger.info(
            "explorer_complete",
            analyzed=total_analyzed,
            events=len(events),
            rejected=len(rejected),
            failed_batches=failed_batches,
        )
        emit(
            on_progress,
            ProgressEvent(
                phase=ProgressPhase.EXPLORER_COMPLETE,
                message=f"Explorer found {len(events)} valid events",
                percent=100,
                current=total,
                total=total,
            ),
        )
        return result
