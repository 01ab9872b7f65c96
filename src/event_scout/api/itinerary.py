"""Itinerary generation and editing endpoints."""

from __future__ import annotations

import asyncio
import json
from datetime import date, timedelta
from typing import Any, AsyncIterator, Optional

import structlog
from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.responses import StreamingResponse

from event_scout.api.models import EXAMPLE_REQUEST, ErrorResponse, ItineraryRequest
from event_scout.config import Settings
from event_scout.editor import ActivityEditor
from event_scout.models import EditRequest, ProgressEvent
from event_scout.pipeline import ItineraryOrchestrator, new_request_id

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["itinerary"])

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# Pipeline runs behind SSE streams, held until done even if the client leaves.
_background_tasks: set[asyncio.Task[None]] = set()


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body = ErrorResponse(error=error, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def _resolve(
    body: ItineraryRequest, settings: Settings
) -> tuple[Optional[JSONResponse], Optional[tuple[str, list[str], date, date]]]:
    """Validate an itinerary request and fill in default dates."""
    interests = body.interest_list()
    if not body.city or not interests:
        return _error(400, "city and interests are required", example=EXAMPLE_REQUEST), None

    start = body.start_date or date.today()
    end = body.end_date or start + timedelta(days=settings.default_days)
    if end < start:
        return _error(400, "end_date must not be before start_date"), None
    return None, (body.city, interests, start, end)


def _frame(payload: dict[str, Any]) -> bytes:
    return f"data: {json.dumps(jsonable_encoder(payload))}\n\n".encode("utf-8")


@router.post("/generate-itinerary", responses=ERROR_RESPONSES)
async def generate_itinerary(body: ItineraryRequest, request: Request):
    """Run the discovery pipeline and return the composed itinerary."""
    settings: Settings = request.app.state.settings
    orchestrator: ItineraryOrchestrator = request.app.state.orchestrator

    error, resolved = _resolve(body, settings)
    if error is not None:
        return error
    city, interests, start, end = resolved

    request_id = new_request_id()
    try:
        result = await orchestrator.generate(city, interests, start, end, request_id=request_id)
    except Exception as e:
        logger.exception("generate_itinerary_failed", request_id=request_id, error=str(e))
        return _error(500, str(e) or "Failed to generate itinerary", request_id=request_id)

    return result.to_response()


@router.post("/generate-itinerary-stream", responses=ERROR_RESPONSES)
async def generate_itinerary_stream(body: ItineraryRequest, request: Request):
    """Stream pipeline progress via Server-Sent Events (SSE).

    Frames (``data: <JSON>``):
      - ``{"type": "connected", "request_id"}``
      - ``{"type": "progress", "phase", "message", "percent", "current", "total"}``
      - ``{"type": "complete", "result"}``
      - ``{"type": "error", "error", "request_id"}``

    The pipeline keeps running if the client disconnects.
    """
    settings: Settings = request.app.state.settings
    orchestrator: ItineraryOrchestrator = request.app.state.orchestrator

    error, resolved = _resolve(body, settings)
    if error is not None:
        return error
    city, interests, start, end = resolved

    request_id = new_request_id()
    frames: asyncio.Queue[Optional[dict[str, Any]]] = asyncio.Queue()

    def on_progress(event: ProgressEvent) -> None:
        frames.put_nowait({"type": "progress", **event.model_dump(mode="json")})

    async def run() -> None:
        try:
            result = await orchestrator.generate(
                city, interests, start, end, on_progress=on_progress, request_id=request_id
            )
            frames.put_nowait({"type": "complete", "result": result.to_response()})
        except Exception as e:
            logger.exception("generate_itinerary_stream_failed", request_id=request_id)
            frames.put_nowait({"type": "error", "error": str(e), "request_id": request_id})
        finally:
            frames.put_nowait(None)

    async def gen() -> AsyncIterator[bytes]:
        task = asyncio.create_task(run())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        yield _frame({"type": "connected", "request_id": request_id})
        while True:
            frame = await frames.get()
            if frame is None:
                break
            yield _frame(frame)
        await task
        _background_tasks.discard(task)

    return StreamingResponse(
        gen(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/edit-itinerary", responses=ERROR_RESPONSES)
async def edit_itinerary(body: dict[str, Any], request: Request):
    """Apply one free-text edit to a single activity."""
    editor: ActivityEditor = request.app.state.editor

    if not str(body.get("edit_request") or "").strip() or not body.get("current_activity"):
        return _error(400, "edit_request and current_activity are required")

    try:
        edit_request = EditRequest.model_validate(body)
    except PydanticValidationError as e:
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in e.errors()
        ]
        return _error(400, "Invalid edit request", details=details)

    try:
        result = await editor.process_edit(edit_request)
    except Exception as e:
        logger.exception("edit_itinerary_failed", error=str(e))
        return _error(500, str(e) or "Failed to process edit")

    return result.model_dump(mode="json")
