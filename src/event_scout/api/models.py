"""API models for the Event Scout HTTP surface."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

EXAMPLE_REQUEST: dict[str, Any] = {
    "city": "San Francisco",
    "interests": "technology startups",
    "start_date": "2025-02-01",
    "end_date": "2025-02-03",
}


class ItineraryRequest(BaseModel):
    """Body of the itinerary endpoints.

    ``city`` and ``interests`` are optional here so that a missing value can be
    answered with an example payload instead of a schema error.
    """

    city: Optional[str] = None
    interests: Union[str, list[str], None] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("city", mode="before")
    @classmethod
    def _strip_city(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    def interest_list(self) -> list[str]:
        raw = self.interests
        if raw is None:
            return []
        parts = raw.split(",") if isinstance(raw, str) else raw
        return [str(p).strip() for p in parts if str(p).strip()]


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    model: str
    features: list[str]


class InterestsResponse(BaseModel):
    categories: list[dict[str, Any]]
    tags: list[str]


class ErrorResponse(BaseModel):
    error: str
    request_id: Optional[str] = None
    details: Optional[list[str]] = None
    example: Optional[dict[str, Any]] = Field(default=None)
