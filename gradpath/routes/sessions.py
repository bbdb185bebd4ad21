"""
FastAPI routes for in-memory recommendation sessions.

A session keeps the results of every search round and the user's likes, so
the frontend can "load more" without tracking exclusion lists itself.

Endpoints:
- POST   /sessions: Create a session and run the first search
- GET    /sessions/{session_id}: Current session snapshot
- POST   /sessions/{session_id}/load-more: Fetch another round
- POST   /sessions/{session_id}/supervisors/{match_id}/like: Toggle a like
- POST   /sessions/{session_id}/programs/{match_id}/like: Toggle a like
- GET    /sessions/{session_id}/saved: Liked supervisors and programs
- DELETE /sessions/{session_id}: Drop the session
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from gradpath.routes.recommendations import recommendation_http_error
from gradpath.schemas.sessions import (
    LikeToggleResponse,
    SavedItemsResponse,
    SessionCreateRequest,
    SessionResponse,
)
from gradpath.services.exceptions import (
    MatchNotFoundError,
    RecommendationError,
    SessionBusyError,
    SessionError,
    SessionNotFoundError,
    SessionStateError,
)
from gradpath.services.session_service import RecommendationSession, session_store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"]
)


def session_http_error(exc: SessionError) -> HTTPException:
    """Map a session error to an HTTP error."""
    if isinstance(exc, (SessionNotFoundError, MatchNotFoundError)):
        status_code, error_code = status.HTTP_404_NOT_FOUND, "not_found"
    elif isinstance(exc, SessionBusyError):
        status_code, error_code = status.HTTP_409_CONFLICT, "busy"
    elif isinstance(exc, SessionStateError):
        status_code, error_code = status.HTTP_400_BAD_REQUEST, "invalid_state"
    else:
        status_code, error_code = status.HTTP_400_BAD_REQUEST, "session_error"

    return HTTPException(
        status_code=status_code,
        detail={
            "error": error_code,
            "details": str(exc)
        }
    )


def _get_session(session_id: str) -> RecommendationSession:
    try:
        return session_store.get(session_id)
    except SessionNotFoundError as e:
        raise session_http_error(e) from e


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create session",
    description="""
    Creates a session and runs the first search for the submitted profile.

    If the search fails the session is not kept and a 502 is returned.
    """
)
async def create_session(request: SessionCreateRequest) -> SessionResponse:
    session = session_store.create()
    logger.info(f"Session {session.id} created")

    try:
        await session.start(request.profile)
    except RecommendationError as e:
        logger.error(f"Initial search for session {session.id} failed: {e}")
        session_store.delete(session.id)
        raise recommendation_http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error starting session {session.id}: {type(e).__name__}: {e}")
        session_store.delete(session.id)
        raise

    return session.to_response()


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get session",
)
async def get_session(session_id: str) -> SessionResponse:
    return _get_session(session_id).to_response()


@router.post(
    "/{session_id}/load-more",
    response_model=SessionResponse,
    summary="Load more results",
    description="""
    Runs another search excluding every supervisor and program already shown,
    and appends the new results.

    Only one load-more may run per session at a time (409 otherwise).
    On a 502 the session's accumulated results are unchanged.
    """
)
async def load_more(session_id: str) -> SessionResponse:
    session = _get_session(session_id)

    try:
        await session.load_more()
    except SessionError as e:
        raise session_http_error(e) from e
    except RecommendationError as e:
        logger.error(f"Load more for session {session_id} failed: {e}")
        raise recommendation_http_error(e) from e

    return session.to_response()


@router.post(
    "/{session_id}/supervisors/{match_id}/like",
    response_model=LikeToggleResponse,
    summary="Toggle supervisor like",
)
async def toggle_supervisor_like(session_id: str, match_id: str) -> LikeToggleResponse:
    session = _get_session(session_id)
    try:
        liked = session.toggle_supervisor_like(match_id)
    except MatchNotFoundError as e:
        raise session_http_error(e) from e
    return LikeToggleResponse(id=match_id, liked=liked)


@router.post(
    "/{session_id}/programs/{match_id}/like",
    response_model=LikeToggleResponse,
    summary="Toggle program like",
)
async def toggle_program_like(session_id: str, match_id: str) -> LikeToggleResponse:
    session = _get_session(session_id)
    try:
        liked = session.toggle_program_like(match_id)
    except MatchNotFoundError as e:
        raise session_http_error(e) from e
    return LikeToggleResponse(id=match_id, liked=liked)


@router.get(
    "/{session_id}/saved",
    response_model=SavedItemsResponse,
    summary="List saved items",
)
async def list_saved(session_id: str) -> SavedItemsResponse:
    return _get_session(session_id).saved_items()


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete session",
)
async def delete_session(session_id: str) -> Response:
    try:
        session_store.delete(session_id)
    except SessionNotFoundError as e:
        raise session_http_error(e) from e
    logger.info(f"Session {session_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
