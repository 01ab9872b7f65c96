"""Unit tests for the HTTP surface."""

import json
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from event_scout.api import create_app
from event_scout.api import itinerary as itinerary_routes
from event_scout.editor import ActivityEditor
from event_scout.exceptions import GenerationError
from event_scout.models import ProgressEvent, ProgressPhase
from event_scout.pipeline import ItineraryOrchestrator


class RecordingOrchestrator(ItineraryOrchestrator):
    """Real orchestrator that records the arguments of each run."""

    def __init__(self, settings, client) -> None:
        super().__init__(settings, client)
        self.runs: list[dict] = []

    async def generate(self, city, interests, start_date, end_date, on_progress=None, request_id=None):
        self.runs.append(
            {"city": city, "interests": interests, "start_date": start_date, "end_date": end_date}
        )
        return await super().generate(
            city, interests, start_date, end_date, on_progress=on_progress, request_id=request_id
        )


class FailingOrchestrator(ItineraryOrchestrator):
    """Orchestrator whose runs always fail after one progress event."""

    async def generate(self, city, interests, start_date, end_date, on_progress=None, request_id=None):
        if on_progress is not None:
            on_progress(ProgressEvent(phase=ProgressPhase.PIPELINE_STARTED, message="start", percent=0))
        raise GenerationError("upstream unavailable")


class TaskTrackingOrchestrator(ItineraryOrchestrator):
    """Orchestrator that records how many stream runs are held while it runs."""

    held: list[int]

    async def generate(self, city, interests, start_date, end_date, on_progress=None, request_id=None):
        self.held = [len(itinerary_routes._background_tasks)]
        return await super().generate(
            city, interests, start_date, end_date, on_progress=on_progress, request_id=request_id
        )


@pytest.fixture
def orchestrator(mock_settings, fake_client):
    return RecordingOrchestrator(mock_settings, fake_client)


@pytest.fixture
def client(mock_settings, fake_client, orchestrator) -> TestClient:
    app = create_app(
        mock_settings,
        orchestrator=orchestrator,
        editor=ActivityEditor(fake_client, mock_settings),
    )
    return TestClient(app)


def _frames(body: str) -> list[dict]:
    frames = []
    for chunk in body.split("\n\n"):
        chunk = chunk.strip()
        if chunk.startswith("data: "):
            frames.append(json.loads(chunk[len("data: "):]))
    return frames


class TestMetaEndpoints:
    """Test suite for health and interests."""

    def test_health(self, client: TestClient) -> None:
        """Test the health payload."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["model"] == "gemini-2.0-flash"
        assert "google_search_grounding" in body["features"]
        assert body["timestamp"]

    def test_error_model_documented(self, client: TestClient) -> None:
        """Test that routes document their error body."""
        schema = client.get("/openapi.json").json()

        responses = schema["paths"]["/api/generate-itinerary"]["post"]["responses"]
        assert responses["400"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
        assert "500" in schema["paths"]["/api/edit-itinerary"]["post"]["responses"]
        assert "ErrorResponse" in schema["components"]["schemas"]

    def test_interests(self, client: TestClient) -> None:
        """Test the interests taxonomy endpoint."""
        body = client.get("/api/interests").json()

        assert len(body["categories"]) == 10
        assert body["tags"] == sorted(body["tags"])


class TestGenerateItinerary:
    """Test suite for POST /api/generate-itinerary."""

    def test_missing_fields(self, client: TestClient, fake_client) -> None:
        """Test that missing city/interests gives 400 with an example payload."""
        response = client.post("/api/generate-itinerary", json={"city": "Lisbon"})

        assert response.status_code == 400
        body = response.json()
        assert "city and interests are required" in body["error"]
        assert body["example"]["city"]
        assert fake_client.calls == []

    def test_invalid_date(self, client: TestClient) -> None:
        """Test that malformed dates are a client error."""
        response = client.post(
            "/api/generate-itinerary",
            json={"city": "Lisbon", "interests": "jazz", "start_date": "soon"},
        )

        assert response.status_code == 400

    def test_inverted_range(self, client: TestClient) -> None:
        """Test that an end date before the start date is rejected."""
        response = client.post(
            "/api/generate-itinerary",
            json={"city": "Lisbon", "interests": "jazz", "start_date": "2026-03-15", "end_date": "2026-03-14"},
        )

        assert response.status_code == 400

    def test_success(self, client: TestClient, fake_client, orchestrator) -> None:
        """Test a run with comma-separated interests and default dates."""
        fake_client.queue(*[{"links": []}] * 8)

        response = client.post("/api/generate-itinerary", json={"city": "Lisbon", "interests": "jazz, food"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["interests"] == ["jazz", "food"]
        assert body["pipeline_stats"]["message"] == "no links found"
        assert body["request_id"]
        run = orchestrator.runs[0]
        assert run["start_date"] == date.today()
        assert run["end_date"] == date.today() + timedelta(days=3)
        assert len(fake_client.calls) == 8

    def test_pipeline_failure(self, mock_settings, fake_client) -> None:
        """Test that a pipeline error gives 500 with a request id."""
        app = create_app(
            mock_settings,
            orchestrator=FailingOrchestrator(mock_settings, fake_client),
            editor=ActivityEditor(fake_client, mock_settings),
        )

        response = TestClient(app).post(
            "/api/generate-itinerary", json={"city": "Lisbon", "interests": ["jazz"]}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "upstream unavailable"
        assert body["request_id"]


class TestGenerateItineraryStream:
    """Test suite for POST /api/generate-itinerary-stream."""

    def test_stream_frames(self, client: TestClient, fake_client) -> None:
        """Test the connected, progress and complete frames."""
        fake_client.queue({"links": []})

        response = client.post(
            "/api/generate-itinerary-stream",
            json={"city": "Lisbon", "interests": "jazz", "start_date": "2026-03-14", "end_date": "2026-03-14"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        frames = _frames(response.text)
        types = [f["type"] for f in frames]
        assert types[0] == "connected"
        assert "progress" in types
        assert types[-1] == "complete"
        assert frames[-1]["result"]["city"] == "Lisbon"
        progress = [f for f in frames if f["type"] == "progress"]
        assert progress[-1]["percent"] == 100
        assert frames[0]["request_id"] == frames[-1]["result"]["request_id"]

    def test_stream_error_frame(self, mock_settings, fake_client) -> None:
        """Test that a failing run ends with an error frame."""
        app = create_app(
            mock_settings,
            orchestrator=FailingOrchestrator(mock_settings, fake_client),
            editor=ActivityEditor(fake_client, mock_settings),
        )

        response = TestClient(app).post(
            "/api/generate-itinerary-stream", json={"city": "Lisbon", "interests": "jazz"}
        )

        frames = _frames(response.text)
        assert [f["type"] for f in frames] == ["connected", "progress", "error"]
        assert frames[-1]["error"] == "upstream unavailable"

    def test_stream_validation(self, client: TestClient) -> None:
        """Test that invalid input is rejected before streaming."""
        response = client.post("/api/generate-itinerary-stream", json={"interests": "jazz"})

        assert response.status_code == 400

    def test_stream_run_is_held_until_done(self, mock_settings, fake_client) -> None:
        """Test that the background run is referenced while running and released after."""
        fake_client.queue({"links": []})
        orchestrator = TaskTrackingOrchestrator(mock_settings, fake_client)
        app = create_app(
            mock_settings,
            orchestrator=orchestrator,
            editor=ActivityEditor(fake_client, mock_settings),
        )

        response = TestClient(app).post(
            "/api/generate-itinerary-stream",
            json={"city": "Lisbon", "interests": "jazz", "start_date": "2026-03-14", "end_date": "2026-03-14"},
        )

        assert _frames(response.text)[-1]["type"] == "complete"
        assert orchestrator.held == [1]
        assert itinerary_routes._background_tasks == set()


class TestEditItinerary:
    """Test suite for POST /api/edit-itinerary."""

    def test_missing_fields(self, client: TestClient, fake_client) -> None:
        """Test that a missing edit request gives 400 without a model call."""
        response = client.post("/api/edit-itinerary", json={"current_activity": {"name": "A"}})

        assert response.status_code == 400
        assert fake_client.calls == []

    def test_edit_success(self, client: TestClient, fake_client) -> None:
        """Test a successful edit."""
        fake_client.queue({"operation": "delete", "change_summary": "Removed Gallery Talk"})

        response = client.post(
            "/api/edit-itinerary",
            json={
                "edit_request": "remove this",
                "current_activity": {"name": "Gallery Talk"},
                "city": "Lisbon",
                "interests": "art",
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "intent": "edit",
            "operation": "delete",
            "updated_activity": None,
            "new_activity": None,
            "change_summary": "Removed Gallery Talk",
            "message": None,
            "suggested_actions": None,
        }

    def test_edit_failure(self, client: TestClient, fake_client) -> None:
        """Test that an unparseable model reply gives 500."""
        fake_client.queue("no idea")

        response = client.post(
            "/api/edit-itinerary",
            json={"edit_request": "remove this", "current_activity": {"name": "Gallery Talk"}},
        )

        assert response.status_code == 500
        assert "error" in response.json()
