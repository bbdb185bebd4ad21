"""
Coerce the parsed Gemini payload into typed SupervisorMatch / ProgramMatch records.

The model's JSON is untrusted: arrays may be missing, fields may be absent or
of the wrong type, URLs may be relative or invented. This module never rejects
a payload. It fills gaps, assigns synthetic ids and replaces unusable links
with a Google search URL that is guaranteed to work.
"""

import logging
import secrets
import string
from typing import Any, Callable, Iterable, List, Mapping, Optional, Set
from urllib.parse import quote

from gradpath.schemas.recommendations import (
    CitationLink,
    ProgramMatch,
    RecommendationBatch,
    SupervisorMatch,
)
from gradpath.services.citations import dedupe_citations

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 9
_MAX_ID_ATTEMPTS = 8

SEARCH_URL_PREFIX = "https://www.google.com/search?q="
ABSOLUTE_URL_PREFIXES = ("http://", "https://")
DEFAULT_GENERAL_ADVICE = "Strategic advice available upon request."

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def generate_match_id() -> str:
    """Return a random 9-character base-36 identifier (36^9 possibilities)."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def _next_id(id_generator: IdGenerator, seen: Set[str]) -> str:
    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = id_generator()
        if candidate not in seen:
            seen.add(candidate)
            return candidate
    raise ValueError("Identifier generator keeps returning duplicate ids")


def is_absolute_url(value: Any) -> bool:
    """True when value is a string starting with http:// or https://."""
    return isinstance(value, str) and value.lower().startswith(ABSOLUTE_URL_PREFIXES)


def build_search_url(*parts: str) -> str:
    """
    Build a Google search URL from the non-empty parts, joined by spaces.

    The query is percent-encoded as a single parameter value.
    """
    query = " ".join(part.strip() for part in parts if part and part.strip())
    return SEARCH_URL_PREFIX + quote(query, safe=_URI_COMPONENT_SAFE)


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    text = _as_str(value)
    return text or None


def _as_score(value: Any) -> int:
    """Coerce a match score to an int in 0..100; unusable values become 0."""
    if isinstance(value, bool):
        return 0
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, score))


def _as_items(raw: Any) -> List[Mapping[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, Mapping)]


def normalize_supervisors(
    raw: Any,
    id_generator: IdGenerator = generate_match_id,
    seen_ids: Optional[Set[str]] = None,
) -> List[SupervisorMatch]:
    """
    Build SupervisorMatch records from the payload's "supervisors" array.

    Args:
        raw: Whatever the payload held under "supervisors" (may be missing)
        id_generator: Source of synthetic ids
        seen_ids: Ids already in use; new ids are added to it

    Returns:
        One record per mapping element, in input order
    """
    seen = seen_ids if seen_ids is not None else set()
    supervisors = []
    for item in _as_items(raw):
        name = _as_str(item.get("name"))
        university = _as_str(item.get("university"))
        department = _as_str(item.get("department"))

        website_url = item.get("websiteUrl")
        if not is_absolute_url(website_url):
            website_url = build_search_url(name, university, department, "lab profile")

        supervisors.append(SupervisorMatch(
            id=_next_id(id_generator, seen),
            name=name,
            university=university,
            department=department,
            research_area=_as_str(item.get("researchArea")),
            match_reason=_as_str(item.get("matchReason")),
            match_score=_as_score(item.get("matchScore")),
            website_url=website_url,
            recent_paper=_as_optional_str(item.get("recentPaper")),
        ))
    return supervisors


def normalize_programs(
    raw: Any,
    target_degree: str,
    id_generator: IdGenerator = generate_match_id,
    seen_ids: Optional[Set[str]] = None,
) -> List[ProgramMatch]:
    """
    Build ProgramMatch records from the payload's "programs" array.

    A missing degree falls back to the student's target degree, and that value
    is also what the search URL fallback uses.
    """
    seen = seen_ids if seen_ids is not None else set()
    programs = []
    for item in _as_items(raw):
        university = _as_str(item.get("university"))
        program_name = _as_str(item.get("programName"))
        degree = _as_str(item.get("degree")) or target_degree

        website_url = item.get("websiteUrl")
        if not is_absolute_url(website_url):
            website_url = build_search_url(university, program_name, degree, "admissions")

        programs.append(ProgramMatch(
            id=_next_id(id_generator, seen),
            university=university,
            program_name=program_name,
            degree=degree,
            focus=_as_str(item.get("focus")),
            match_reason=_as_str(item.get("matchReason")),
            match_score=_as_score(item.get("matchScore")),
            website_url=website_url,
        ))
    return programs


def normalize_general_advice(value: Any) -> str:
    """Return the advice text, or the fixed placeholder when it is missing."""
    if isinstance(value, str) and value.strip():
        return value
    return DEFAULT_GENERAL_ADVICE


def build_recommendation_batch(
    payload: Mapping[str, Any],
    target_degree: str,
    citations: Iterable[CitationLink] = (),
    id_generator: IdGenerator = generate_match_id,
    reserved_ids: Optional[Iterable[str]] = None,
) -> RecommendationBatch:
    """
    Assemble one RecommendationBatch from a parsed payload.

    Args:
        payload: Parsed JSON object ({} for an empty model answer)
        target_degree: The profile's target degree
        citations: Grounding citations from the gateway
        id_generator: Source of synthetic ids
        reserved_ids: Ids already handed out (e.g. earlier batches of a session)

    Returns:
        RecommendationBatch with unique ids across supervisors and programs
    """
    seen = set(reserved_ids or ())
    supervisors = normalize_supervisors(payload.get("supervisors"), id_generator, seen)
    programs = normalize_programs(payload.get("programs"), target_degree, id_generator, seen)

    logger.info(f"Normalized {len(supervisors)} supervisors and {len(programs)} programs")

    return RecommendationBatch(
        supervisors=supervisors,
        programs=programs,
        general_advice=normalize_general_advice(payload.get("generalAdvice")),
        grounding_links=dedupe_citations(citations),
    )
