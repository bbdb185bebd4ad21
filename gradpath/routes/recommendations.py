"""
FastAPI routes for the stateless recommendation endpoints.

Endpoints:
- POST /recommendations/query: One grounded supervisor/program search
- POST /recommendations/email-draft: Draft an outreach email to a supervisor
"""

import logging

from fastapi import APIRouter, HTTPException, status

from gradpath.schemas.recommendations import (
    EmailDraftRequest,
    EmailDraftResponse,
    RecommendationBatch,
    RecommendationQueryRequest,
)
from gradpath.services.exceptions import (
    InvalidResponseFormatError,
    RecommendationError,
    RecommendationFetchError,
)
from gradpath.services.recommendation_service import (
    draft_outreach_email,
    fetch_recommendations,
)

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/recommendations",
    tags=["recommendations"]
)


def recommendation_http_error(exc: RecommendationError) -> HTTPException:
    """Map a pipeline error to the HTTP error returned to the frontend."""
    if isinstance(exc, InvalidResponseFormatError):
        error_code = "invalid_format"
    elif isinstance(exc, RecommendationFetchError):
        error_code = "fetch_error"
    else:
        error_code = "recommendation_error"

    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "error": error_code,
            "details": str(exc)
        }
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/query",
    response_model=RecommendationBatch,
    status_code=200,
    summary="Find supervisors and programs",
    description="""
    Runs one grounded search for supervisors and graduate programs.

    **Frontend Flow:**
    1. User fills the profile form
    2. POST /recommendations/query with the profile
    3. For "load more", resend the profile with excludeSupervisors and
       excludePrograms holding the names already shown

    **Errors:**
    - 502 fetch_error: Gemini could not be reached
    - 502 invalid_format: Gemini answered without usable JSON

    An empty model answer is not an error: the batch is empty and
    generalAdvice holds a placeholder.
    """
)
async def query_recommendations_endpoint(
    request: RecommendationQueryRequest,
) -> RecommendationBatch:
    """
    Stateless recommendation query endpoint.

    - Parse/Validate: Handled by Pydantic RecommendationQueryRequest
    - Call LLM: Single grounded Gemini call via service layer
    - Map output: Service layer normalizes the payload into RecommendationBatch
    """
    logger.info(
        f"POST /recommendations/query called "
        f"(exclude_supervisors={len(request.exclude_supervisors)}, "
        f"exclude_programs={len(request.exclude_programs)})"
    )

    try:
        batch = await fetch_recommendations(
            profile=request.profile,
            exclude_supervisors=request.exclude_supervisors,
            exclude_programs=request.exclude_programs,
        )
    except RecommendationError as e:
        logger.error(f"Recommendation query failed: {type(e).__name__}: {e}")
        raise recommendation_http_error(e) from e

    return batch


@router.post(
    "/email-draft",
    response_model=EmailDraftResponse,
    status_code=200,
    summary="Draft an outreach email",
    description="""
    Drafts a short cold email from the student to a potential supervisor.

    Always returns 200: when drafting fails, emailDraft holds a placeholder
    message instead of a draft.
    """
)
async def email_draft_endpoint(request: EmailDraftRequest) -> EmailDraftResponse:
    logger.info("POST /recommendations/email-draft called")

    draft = await draft_outreach_email(
        professor_name=request.professor_name,
        university=request.university,
        topic=request.topic,
        profile=request.profile,
    )
    return EmailDraftResponse(email_draft=draft)
