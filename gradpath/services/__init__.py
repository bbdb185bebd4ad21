"""
Service layer for the GradPath backend.

Contains the recommendation pipeline and the session bookkeeping that:
- Builds prompts and calls Gemini with Google Search grounding
- Extracts and repairs the JSON embedded in the model's answer
- Maps the payload into typed Pydantic records
- Accumulates results and likes across "load more" rounds

Services act as the glue between routes (HTTP layer) and the Gemini gateway.
"""

from .citations import dedupe_citations
from .exceptions import (
    InvalidResponseFormatError,
    MalformedResponseError,
    MatchNotFoundError,
    RecommendationError,
    RecommendationFetchError,
    SessionBusyError,
    SessionError,
    SessionNotFoundError,
    SessionStateError,
)
from .recommendation_service import draft_outreach_email, fetch_recommendations
from .session_service import RecommendationSession, SessionStore, session_store

__all__ = [
    "fetch_recommendations",
    "draft_outreach_email",
    "dedupe_citations",
    "RecommendationSession",
    "SessionStore",
    "session_store",
    "RecommendationError",
    "RecommendationFetchError",
    "InvalidResponseFormatError",
    "MalformedResponseError",
    "SessionError",
    "SessionNotFoundError",
    "MatchNotFoundError",
    "SessionBusyError",
    "SessionStateError",
]
