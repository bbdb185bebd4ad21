"""
Gemini gateway - the only module that talks to the Google Gen AI SDK.

Two calls are exposed:
- generate_grounded_content: prompt + Google Search grounding tool, returns the
  response text together with the grounding citations
- generate_text: plain prompt, returns text only (used for email drafts)

Every transport or service failure is raised as RecommendationFetchError.
Nothing here retries; the caller decides what to do with a failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from google import genai
from google.genai import types

from gradpath.config import settings
from gradpath.schemas.recommendations import CitationLink
from gradpath.services.exceptions import RecommendationFetchError

logger = logging.getLogger(__name__)

# Initialize Gemini client (lazy initialization)
_gemini_client = None

DEFAULT_CITATION_TITLE = "Source"


@dataclass
class GroundedResponse:
    """Raw text returned by Gemini plus the grounding metadata we keep."""
    text: str = ""
    citations: List[CitationLink] = field(default_factory=list)
    web_search_queries: List[str] = field(default_factory=list)


def get_gemini_client() -> Optional[genai.Client]:
    """
    Lazy initialization of the Gemini client.

    Returns None when GOOGLE_API_KEY is not configured.
    """
    global _gemini_client

    if _gemini_client is not None:
        return _gemini_client

    if not settings.GOOGLE_API_KEY:
        logger.warning(
            "GOOGLE_API_KEY not configured. Recommendation service will not work. "
            "Please set GOOGLE_API_KEY in your .env file."
        )
        return None

    _gemini_client = genai.Client(api_key=settings.GOOGLE_API_KEY)
    logger.info("Gemini client initialized successfully")
    return _gemini_client


def _extract_text(response: Any) -> str:
    """
    Get the response text, preferring the candidate's parts.

    response.text can be None even when parts carry text, so parts are read
    first and response.text is only a fallback.
    """
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [
            part.text for part in parts
            if isinstance(getattr(part, "text", None), str) and part.text
        ]
        if texts:
            return "".join(texts)

    text = getattr(response, "text", None)
    return text if isinstance(text, str) else ""


def _extract_grounding(response: Any) -> tuple[List[CitationLink], List[str]]:
    """Extract citation links and search queries from grounding metadata."""
    citations: List[CitationLink] = []
    queries: List[str] = []

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return citations, queries

    metadata = getattr(candidates[0], "grounding_metadata", None)
    if not metadata:
        return citations, queries

    for query in getattr(metadata, "web_search_queries", None) or []:
        if isinstance(query, str) and query:
            queries.append(query)

    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        web = getattr(chunk, "web", None)
        if not web:
            continue
        uri = getattr(web, "uri", None)
        if not isinstance(uri, str) or not uri:
            continue
        title = getattr(web, "title", None)
        citations.append(CitationLink(
            title=title if isinstance(title, str) and title else DEFAULT_CITATION_TITLE,
            uri=uri,
        ))

    return citations, queries


def _require_client() -> genai.Client:
    client = get_gemini_client()
    if client is None:
        logger.error("Gemini client not available")
        raise RecommendationFetchError(
            "Recommendation service is not configured. Please contact support."
        )
    return client


async def generate_grounded_content(
    prompt: str,
    *,
    use_search: bool = True,
    temperature: Optional[float] = None,
    system_instruction: Optional[str] = None,
) -> GroundedResponse:
    """
    Call Gemini with the Google Search grounding tool enabled.

    Args:
        prompt: Full user prompt
        use_search: Enable the Google Search tool (web-grounded answer)
        temperature: Sampling temperature, defaults to settings value
        system_instruction: Optional system prompt

    Returns:
        GroundedResponse with text ("" when the model returned nothing) and
        citations (empty when there is no grounding metadata)

    Raises:
        RecommendationFetchError: client missing, network or API failure
    """
    client = _require_client()

    # Google Search grounding doesn't support response_mime_type='application/json'
    # or response_schema, so the JSON shape is requested in the prompt instead.
    config = types.GenerateContentConfig(
        system_instruction=system_instruction,
        temperature=settings.RECOMMENDATION_TEMPERATURE if temperature is None else temperature,
        max_output_tokens=settings.MAX_OUTPUT_TOKENS,
        tools=[types.Tool(google_search=types.GoogleSearch())] if use_search else None,
    )

    try:
        logger.info(
            f"Calling Gemini model={settings.GEMINI_MODEL} "
            f"(search={'on' if use_search else 'off'}, prompt_chars={len(prompt)})"
        )
        response = await client.aio.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=config,
        )
    except Exception as e:
        logger.error(f"Error calling Gemini API: {type(e).__name__}: {e}")
        raise RecommendationFetchError() from e

    text = _extract_text(response)
    citations, queries = _extract_grounding(response)

    if not text:
        logger.warning("Empty text in Gemini response")
    if queries:
        logger.info(f"Web search queries: {queries}")
    if citations:
        logger.info(f"Found {len(citations)} grounding citations")

    return GroundedResponse(text=text, citations=citations, web_search_queries=queries)


async def generate_text(prompt: str, *, temperature: Optional[float] = None) -> str:
    """
    Call Gemini without tools and return the plain response text.

    Raises:
        RecommendationFetchError: client missing, network or API failure
    """
    client = _require_client()

    config = None
    if temperature is not None:
        config = types.GenerateContentConfig(temperature=temperature)

    try:
        response = await client.aio.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=config,
        )
    except Exception as e:
        logger.error(f"Error calling Gemini API: {type(e).__name__}: {e}")
        raise RecommendationFetchError() from e

    return _extract_text(response)
