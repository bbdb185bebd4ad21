"""
Tests for /sessions endpoints.

The pipeline is mocked at the session service, so every request runs the real
session bookkeeping and route error mapping.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from gradpath.main import app
from gradpath.schemas.recommendations import (
    ProgramMatch,
    RecommendationBatch,
    SupervisorMatch,
)
from gradpath.services.exceptions import InvalidResponseFormatError, RecommendationFetchError
from gradpath.services.session_service import session_store

FETCH_PATH = "gradpath.services.session_service.fetch_recommendations"


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def profile_body():
    return {
        "name": "Ada Lovelace",
        "major": "Computer Science",
        "degreeLevel": "Bachelor's",
        "gpa": "3.9/4.0",
        "researchInterests": "Graph neural networks for drug discovery",
        "targetDegree": "Masters",
        "targetLocations": "Europe",
        "experience": "Two years as RA",
    }


def _batch(supervisor_ids, program_ids):
    return RecommendationBatch(
        supervisors=[
            SupervisorMatch(
                id=sid, name=f"Prof {sid}", university="MIT", department="EECS",
                research_area="ML", match_reason="fit", match_score=80,
                website_url="https://mit.edu",
            )
            for sid in supervisor_ids
        ],
        programs=[
            ProgramMatch(
                id=pid, university="ETH", program_name=f"Program {pid}",
                degree="Masters", focus="ML", match_reason="fit", match_score=70,
                website_url="https://ethz.ch",
            )
            for pid in program_ids
        ],
        general_advice="Apply early.",
    )


@pytest.fixture
def session_id(client, profile_body):
    """A session created with supervisors s1, s2 and program p1."""
    with patch(FETCH_PATH, new=AsyncMock(return_value=_batch(["s1", "s2"], ["p1"]))):
        response = client.post("/sessions", json={"profile": profile_body})
    assert response.status_code == 201
    return response.json()["id"]


class TestCreateSession:
    """Tests for POST /sessions."""

    def test_create_runs_first_search(self, client, profile_body):
        with patch(FETCH_PATH, new=AsyncMock(return_value=_batch(["s1"], ["p1"]))):
            response = client.post("/sessions", json={"profile": profile_body})

        assert response.status_code == 201
        data = response.json()
        assert data["profile"]["targetDegree"] == "Masters"
        assert [s["id"] for s in data["supervisors"]] == ["s1"]
        assert data["generalAdvice"] == "Apply early."
        assert data["savedCount"] == 0
        assert data["isLoadingMore"] is False
        assert len(session_store) == 1

    def test_failed_first_search_drops_session(self, client, profile_body):
        with patch(FETCH_PATH, new=AsyncMock(side_effect=RecommendationFetchError())):
            response = client.post("/sessions", json={"profile": profile_body})

        assert response.status_code == 502
        assert response.json()["detail"]["error"] == "fetch_error"
        assert len(session_store) == 0

    def test_invalid_profile_returns_422(self, client, profile_body):
        profile_body["targetDegree"] = "Bachelors"

        response = client.post("/sessions", json={"profile": profile_body})

        assert response.status_code == 422
        assert len(session_store) == 0


class TestSessionLifecycle:
    """Tests for load-more, likes, saved items and deletion."""

    def test_get_session(self, client, session_id):
        response = client.get(f"/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json()["id"] == session_id

    def test_unknown_session_returns_404(self, client):
        response = client.get("/sessions/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "not_found"

    def test_load_more_appends(self, client, session_id):
        with patch(FETCH_PATH, new=AsyncMock(return_value=_batch(["s3"], ["p2"]))) as mock_fetch:
            response = client.post(f"/sessions/{session_id}/load-more")

        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data["supervisors"]] == ["s1", "s2", "s3"]
        assert [p["id"] for p in data["programs"]] == ["p1", "p2"]
        assert mock_fetch.await_args.kwargs["exclude_supervisors"] == ["Prof s1", "Prof s2"]

    def test_load_more_failure_keeps_results(self, client, session_id):
        with patch(FETCH_PATH, new=AsyncMock(side_effect=InvalidResponseFormatError())):
            response = client.post(f"/sessions/{session_id}/load-more")

        assert response.status_code == 502
        assert response.json()["detail"]["error"] == "invalid_format"

        data = client.get(f"/sessions/{session_id}").json()
        assert [s["id"] for s in data["supervisors"]] == ["s1", "s2"]
        assert data["isLoadingMore"] is False

    def test_load_more_while_busy_returns_409(self, client, session_id):
        session_store.get(session_id).is_loading_more = True

        response = client.post(f"/sessions/{session_id}/load-more")

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "busy"

    def test_toggle_likes_and_saved(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/supervisors/s2/like")
        assert response.json() == {"id": "s2", "liked": True}

        response = client.post(f"/sessions/{session_id}/programs/p1/like")
        assert response.json() == {"id": "p1", "liked": True}

        saved = client.get(f"/sessions/{session_id}/saved").json()
        assert [s["id"] for s in saved["supervisors"]] == ["s2"]
        assert [p["id"] for p in saved["programs"]] == ["p1"]
        assert saved["count"] == 2

        response = client.post(f"/sessions/{session_id}/supervisors/s2/like")
        assert response.json() == {"id": "s2", "liked": False}

        data = client.get(f"/sessions/{session_id}").json()
        assert data["likedSupervisorIds"] == []
        assert data["likedProgramIds"] == ["p1"]
        assert data["savedCount"] == 1

    def test_like_unknown_match_returns_404(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/programs/nope/like")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "not_found"

    def test_delete_session(self, client, session_id):
        response = client.delete(f"/sessions/{session_id}")

        assert response.status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404
        assert client.delete(f"/sessions/{session_id}").status_code == 404


class TestCreateSessionCleanup:
    """The half-created session is dropped whatever the first search raises."""

    def test_unexpected_error_drops_session(self, profile_body):
        client = TestClient(app, raise_server_exceptions=False)

        with patch(FETCH_PATH, new=AsyncMock(side_effect=ValueError("duplicate ids"))):
            response = client.post("/sessions", json={"profile": profile_body})

        assert response.status_code == 500
        assert len(session_store) == 0

    def test_long_profile_fields_accepted(self, client, profile_body):
        profile_body["researchInterests"] = "graph learning " * 500
        profile_body["experience"] = "lab work " * 1000

        with patch(FETCH_PATH, new=AsyncMock(return_value=_batch(["s1"], []))):
            response = client.post("/sessions", json={"profile": profile_body})

        assert response.status_code == 201

    def test_session_count_is_capped(self, client, profile_body):
        with patch.object(session_store, "max_sessions", 5), \
                patch(FETCH_PATH, new=AsyncMock(return_value=_batch(["s1"], []))):
            for _ in range(20):
                assert client.post("/sessions", json={"profile": profile_body}).status_code == 201

        assert len(session_store) == 5
