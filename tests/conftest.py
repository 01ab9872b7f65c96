"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Optional

import pytest
import structlog

from event_scout.exceptions import GenerationError
from event_scout.gemini import GenerationResult


class FakeGenerationClient:
    """Scripted stand-in for GeminiClient.

    Each queued item answers one ``generate`` call in order: strings are
    returned as-is, dicts/lists are JSON-encoded, exceptions are raised.
    """

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.calls: list[dict[str, Any]] = []

    def queue(self, *items: Any) -> "FakeGenerationClient":
        self.responses.extend(items)
        return self

    async def generate(
        self,
        prompt: str,
        *,
        search: bool = False,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> GenerationResult:
        self.calls.append(
            {
                "prompt": prompt,
                "search": search,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        if not self.responses:
            raise GenerationError("no scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if not isinstance(item, str):
            item = json.dumps(item)
        return GenerationResult(text=item)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test applied, including its output stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def mock_settings(tmp_path):
    """Provide settings with no delays and request logs under tmp_path."""
    from event_scout.config import Settings

    return Settings(
        google_api_key="test-key",
        scout_delay_seconds=0,
        explorer_delay_seconds=0,
        request_logging=False,
        log_dir=tmp_path / "logs",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    """Provide an empty scripted generation client."""
    return FakeGenerationClient()


@pytest.fixture
def sample_event_data() -> dict:
    """Provide one event as the model would return it."""
    return {
        "name": "Jazz Jam Session",
        "type": "event",
        "category": "Performance",
        "location": {
            "venue": "Blue Room",
            "address": "12 Market St",
            "city": "Lisbon",
        },
        "coordinates": {"lat": 38.71, "lng": -9.14},
        "start_time": "2026-03-14T19:00:00",
        "end_time": "2026-03-14T21:30:00",
        "duration_minutes": 999,
        "description": "Open jam hosted by the house trio.",
        "source": {"platform": "Eventbrite", "url": "https://www.eventbrite.com/e/jazz-jam-tickets-837261549"},
        "pricing": {"is_free": False, "price": 10, "currency": "EUR"},
        "tags": ["jazz", "music", "jazz"],
        "interest_matched": "jazz",
        "target_date": "2026-03-14",
    }


def make_event(name: str, start: str, end: Optional[str] = None, **extra: Any) -> dict:
    """Build a minimal valid event dict."""
    data = {"name": name, "start_time": start, "end_time": end or start}
    data.update(extra)
    return data


@pytest.fixture
def event_factory():
    """Provide the minimal event dict builder."""
    return make_event
