"""Link models produced by the Scout phase."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LinkConfidence(str, Enum):
    """How strongly the model believes a link is an event page."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Link(BaseModel):
    """A discovered candidate event-page reference."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(description="Event page URL, identity key within a run")
    title: Optional[str] = Field(default=None, description="Title from the search result")
    snippet: Optional[str] = Field(default=None, description="Search result snippet")
    platform: Optional[str] = Field(default=None, description="Free-text source name")
    confidence: LinkConfidence = Field(default=LinkConfidence.MEDIUM)
    interest: Optional[str] = Field(default=None, description="Interest that produced the link")
    date: Optional[dt.date] = Field(default=None, description="Calendar day the search targeted")
    searched_at: Optional[dt.datetime] = Field(default=None, description="When the search ran (UTC)")

    @field_validator("url", mode="before")
    @classmethod
    def _check_url(cls, v: object) -> str:
        url = str(v or "").strip()
        if not url.lower().startswith(("http://", "https://")):
            raise ValueError(f"not an http(s) url: {url!r}")
        return url

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, v: object) -> LinkConfidence:
        if isinstance(v, LinkConfidence):
            return v
        key = str(v or "").strip().lower()
        try:
            return LinkConfidence(key)
        except ValueError:
            return LinkConfidence.LOW


class RejectedLink(BaseModel):
    """A link that failed the event-validity policy."""

    url: Optional[str] = Field(default=None, description="Rejected URL, if known")
    reason: str = Field(default="rejected by model", description="Why the link was rejected")

    @field_validator("reason", mode="before")
    @classmethod
    def _default_reason(cls, v: object) -> str:
        text = str(v or "").strip()
        return text or "rejected by model"
