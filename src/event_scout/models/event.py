"""Event models.

The model-facing contract is tolerant: nested objects may be missing and are
filled with defaults. Time fields are local wall-clock times of the target
city and are never normalized to UTC.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

PROVENANCE_FIELDS = frozenset({"interest_matched", "target_date"})


def wall_clock(value: datetime) -> datetime:
    """Return ``value`` without tzinfo so mixed naive/aware times compare."""
    return value.replace(tzinfo=None)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``."""
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = wall_clock(start), wall_clock(end)
    return int((end - start).total_seconds() // 60)


class Location(BaseModel):
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None


class Coordinates(BaseModel):
    """Latitude/longitude, estimated by the model when unknown."""

    lat: float = 0.0
    lng: float = 0.0


class Source(BaseModel):
    platform: Optional[str] = None
    url: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        if not text or text.lower() in {"null", "none", "n/a"}:
            return None
        return text


class Pricing(BaseModel):
    is_free: bool = False
    price: Optional[str] = None
    currency: Optional[str] = None

    @field_validator("is_free", mode="before")
    @classmethod
    def _none_is_not_free(cls, v: object) -> object:
        return False if v is None else v

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, v: object) -> Optional[str]:
        if v is None:
            return None
        return str(v)


class Event(BaseModel):
    """A validated, scheduled occurrence."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, description="Exact event name")
    type: str = Field(default="event", description="Item kind; discovery always yields 'event'")
    category: str = Field(default="other", description="meetup/workshop/talk/...")
    location: Location = Field(default_factory=Location)
    coordinates: Coordinates = Field(default_factory=Coordinates)
    start_time: datetime = Field(description="Local start time (ISO 8601)")
    end_time: datetime = Field(description="Local end time (ISO 8601)")
    duration_minutes: int = Field(default=0, description="Derived from end_time - start_time")
    description: str = ""
    source: Source = Field(default_factory=Source)
    pricing: Pricing = Field(default_factory=Pricing)
    tags: list[str] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: object) -> str:
        return str(v or "").strip()

    @field_validator("type", "category", mode="before")
    @classmethod
    def _lower_label(cls, v: object, info: ValidationInfo) -> str:
        text = str(v or "").strip().lower()
        if text:
            return text
        return "event" if info.field_name == "type" else "other"

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: object) -> str:
        return "" if v is None else str(v)

    @field_validator("location", mode="before")
    @classmethod
    def _location_from_text(cls, v: object) -> object:
        if v is None:
            return {}
        if isinstance(v, str):
            return {"address": v}
        return v

    @field_validator("coordinates", "source", "pricing", mode="before")
    @classmethod
    def _none_to_default(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _unique_tags(cls, v: object) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        tags: list[str] = []
        for raw in v:
            tag = str(raw).strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @model_validator(mode="after")
    def _derive_duration(self) -> "Event":
        minutes = minutes_between(self.start_time, self.end_time)
        if minutes < 0:
            raise ValueError("end_time precedes start_time")
        self.duration_minutes = minutes
        return self

    @property
    def dedupe_key(self) -> tuple[str, datetime]:
        return (self.name, wall_clock(self.start_time))

    def to_output(self) -> dict[str, Any]:
        """JSON-ready dict without transient provenance fields."""
        return self.model_dump(mode="json", exclude=set(PROVENANCE_FIELDS))


class ExtractedEvent(Event):
    """Event as returned by the Explorer model, carrying provenance."""

    interest_matched: Optional[str] = None
    target_date: Optional[date] = None

    @field_validator("target_date", mode="before")
    @classmethod
    def _lenient_date(cls, v: object) -> object:
        if v in (None, ""):
            return None
        try:
            return date.fromisoformat(str(v)[:10])
        except ValueError:
            return None

    def strip_provenance(self) -> Event:
        return Event.model_validate(self.model_dump(exclude=set(PROVENANCE_FIELDS)))
