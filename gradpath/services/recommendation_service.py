"""
Recommendation Service - Gemini with Google Search Grounding

Finds research supervisors and graduate programs for a student profile using
Gemini with the Google Search grounding tool, and drafts outreach emails.

Architecture:
- Pattern: Grounded LLM (single API call with Google Search tool)
- Model: Gemini 2.5 Flash (settings.GEMINI_MODEL)
- Web Search: Google Search grounding tool (real-time web data)
- Temperature: 0.3 (settings.RECOMMENDATION_TEMPERATURE)
- Output: JSON parsed from text (Google Search tool doesn't support response_schema)

Pipeline:
    build prompt -> call Gemini -> extract/repair JSON -> normalize records
    -> deduplicate citations

Error policy:
- Gemini unreachable or failing -> RecommendationFetchError
- Text present but not usable JSON -> InvalidResponseFormatError / MalformedResponseError
- No text at all -> empty batch with placeholder advice (not an error)
- Email drafting never raises; it returns a placeholder string instead
"""

import logging
from typing import Iterable, Optional, Sequence

from gradpath.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_outreach_email_prompt,
    build_recommendation_user_prompt,
)
from gradpath.config import settings
from gradpath.schemas.profile import StudentProfile
from gradpath.schemas.recommendations import RecommendationBatch
from gradpath.services import gemini_gateway
from gradpath.services.response_parser import parse_recommendation_payload
from gradpath.services.result_normalizer import (
    IdGenerator,
    build_recommendation_batch,
    generate_match_id,
)

logger = logging.getLogger(__name__)

EMAIL_DRAFT_ERROR = "Error generating email draft."
EMAIL_DRAFT_EMPTY = "Could not generate email."


async def fetch_recommendations(
    profile: StudentProfile,
    exclude_supervisors: Optional[Sequence[str]] = None,
    exclude_programs: Optional[Sequence[str]] = None,
    *,
    id_generator: IdGenerator = generate_match_id,
    reserved_ids: Optional[Iterable[str]] = None,
) -> RecommendationBatch:
    """
    Run one recommendation search for a student profile.

    Args:
        profile: The student's profile
        exclude_supervisors: Supervisor names the model must not return again
        exclude_programs: Program names the model must not return again
        id_generator: Source of synthetic match ids (injectable for tests)
        reserved_ids: Ids already used by the caller, never handed out again

    Returns:
        RecommendationBatch with normalized supervisors, programs, advice and
        deduplicated grounding links

    Raises:
        RecommendationFetchError: Gemini could not be reached or failed
        InvalidResponseFormatError: Gemini answered without a JSON object
        MalformedResponseError: the JSON object could not be parsed
    """
    exclude_supervisors = list(exclude_supervisors or [])
    exclude_programs = list(exclude_programs or [])

    logger.info(
        f"fetch_recommendations called (target_degree={profile.target_degree}, "
        f"exclude_supervisors={len(exclude_supervisors)}, "
        f"exclude_programs={len(exclude_programs)})"
    )

    user_prompt = build_recommendation_user_prompt(
        profile=profile,
        exclude_supervisors=exclude_supervisors,
        exclude_programs=exclude_programs,
    )

    response = await gemini_gateway.generate_grounded_content(
        user_prompt,
        use_search=True,
        temperature=settings.RECOMMENDATION_TEMPERATURE,
        system_instruction=RECOMMENDATION_SYSTEM_PROMPT,
    )

    payload = parse_recommendation_payload(response.text)

    batch = build_recommendation_batch(
        payload,
        target_degree=profile.target_degree,
        citations=response.citations,
        id_generator=id_generator,
        reserved_ids=reserved_ids,
    )

    logger.info(
        f"Returning {len(batch.supervisors)} supervisors, {len(batch.programs)} programs, "
        f"{len(batch.grounding_links)} grounding links"
    )
    return batch


async def draft_outreach_email(
    professor_name: str,
    university: str,
    topic: str,
    profile: StudentProfile,
) -> str:
    """
    Draft a short cold email from the student to a potential supervisor.

    Never raises: any failure resolves to EMAIL_DRAFT_ERROR so the frontend
    can show it in place of the draft.
    """
    logger.info(f"draft_outreach_email called for university='{university[:50]}'")

    prompt = build_outreach_email_prompt(
        professor_name=professor_name,
        university=university,
        topic=topic,
        profile=profile,
    )

    try:
        text = await gemini_gateway.generate_text(prompt)
    except Exception as e:
        logger.error(f"Email draft failed: {type(e).__name__}: {e}")
        return EMAIL_DRAFT_ERROR

    return text or EMAIL_DRAFT_EMPTY
