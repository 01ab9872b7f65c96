"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from event_scout.api.itinerary import router as itinerary_router
from event_scout.api.models import ErrorResponse, HealthResponse, InterestsResponse
from event_scout.config import Settings, get_settings
from event_scout.editor import ActivityEditor
from event_scout.interests import INTEREST_CATEGORIES, get_all_tags
from event_scout.pipeline import ItineraryOrchestrator, build_orchestrator
from event_scout.utils import configure_logging

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[ItineraryOrchestrator] = None,
    editor: Optional[ActivityEditor] = None,
) -> FastAPI:
    """Build the API app.

    Args:
        settings: Application settings; loaded from the environment if omitted.
        orchestrator: Pipeline to serve; built from settings if omitted.
        editor: Activity editor; shares the orchestrator's client if omitted.
    """
    settings = settings or get_settings()
    orchestrator = orchestrator or build_orchestrator(settings)
    editor = editor or ActivityEditor(orchestrator.client, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info(
            "api_started",
            model=settings.gemini_model,
            mode=settings.pipeline_mode,
            port=settings.api_port,
        )
        yield
        await orchestrator.aclose()

    app = FastAPI(title="Event Scout", lifespan=lifespan)
    app.state.settings = settings
    app.state.orchestrator = orchestrator
    app.state.editor = editor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        body = ErrorResponse(error="Invalid request", details=details)
        return JSONResponse(status_code=400, content=body.model_dump(mode="json", exclude_none=True))

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        features = ["google_search_grounding", "progress_stream", "activity_editing"]
        if settings.pipeline_mode == "raw_tools":
            features.append("raw_search_scrape")
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            model=settings.gemini_model,
            features=features,
        )

    @app.get("/api/interests", response_model=InterestsResponse)
    def interests() -> InterestsResponse:
        return InterestsResponse(categories=INTEREST_CATEGORIES, tags=get_all_tags())

    app.include_router(itinerary_router)
    return app
