"""
Pytest configuration for GradPath backend tests.

Sets up test environment and global fixtures.
"""
import itertools
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

from gradpath.schemas.profile import StudentProfile  # noqa: E402
from gradpath.services.session_service import session_store  # noqa: E402


@pytest.fixture
def student_profile():
    """A complete PhD applicant profile."""
    return StudentProfile(
        name="Ada Lovelace",
        major="Computer Science",
        degree_level="Bachelor's",
        gpa="3.9/4.0",
        research_interests="Graph neural networks for drug discovery",
        target_degree="PhD",
        target_locations="USA, Switzerland",
        experience="Two years as RA in a computational biology lab",
    )


@pytest.fixture
def sequential_ids():
    """Deterministic id generator: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


def build_gemini_response(text=None, citations=None, queries=None):
    """
    Build an object shaped like a google-genai GenerateContentResponse.

    Args:
        text: Response text (None for an empty answer)
        citations: List of (title, uri) tuples for grounding chunks
        queries: Web search queries reported in grounding metadata
    """
    parts = [SimpleNamespace(text=text)] if text else []
    metadata = None
    if citations is not None or queries is not None:
        metadata = SimpleNamespace(
            web_search_queries=queries or [],
            grounding_chunks=[
                SimpleNamespace(web=SimpleNamespace(title=title, uri=uri))
                for title, uri in (citations or [])
            ],
        )
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts),
        grounding_metadata=metadata,
    )
    return SimpleNamespace(text=text, candidates=[candidate])


@pytest.fixture
def make_gemini_response():
    """Factory fixture for fake Gemini responses."""
    return build_gemini_response


@pytest.fixture
def mock_gemini_client():
    """
    Patch the gateway's client factory with a MagicMock client.

    Set mock_gemini_client.aio.models.generate_content.return_value (or
    side_effect) in the test to control what Gemini "returns".
    """
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    with patch("gradpath.services.gemini_gateway.get_gemini_client", return_value=client):
        yield client


@pytest.fixture(autouse=True)
def clear_sessions():
    """Sessions are process-wide; start every test with an empty store."""
    session_store.clear()
    yield
    session_store.clear()
