"""
Locate, repair and parse the JSON object embedded in a Gemini answer.

With the Google Search tool enabled Gemini cannot be forced into JSON mode, so
the object arrives wrapped in a fenced code block, in a bare fence, or in the
middle of prose. Each heuristic lives in its own function so it can be tested
(and later replaced) on its own.

Failure policy of parse_recommendation_payload:
- empty text            -> {} (caller degrades to an empty batch)
- nothing extractable   -> InvalidResponseFormatError
- extracted but broken  -> MalformedResponseError
"""

import json
import logging
import re
from typing import Any, Dict

from gradpath.services.exceptions import InvalidResponseFormatError, MalformedResponseError

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r'```json\s*([\s\S]*?)```', re.IGNORECASE)
_ANY_FENCE_RE = re.compile(r'```\s*([\s\S]*?)```')
_NEWLINES_RE = re.compile(r'[\r\n]+')
# NUL..BS, VT, FF, SO..US, DEL (tab is left alone, it is valid whitespace)
_CONTROL_CHARS_RE = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')
_TRAILING_COMMA_RE = re.compile(r',(\s*[}\]])')


def extract_json_candidate(text: str) -> str:
    """
    Return the substring of text most likely to be a JSON object.

    Priority order (first match wins):
    1. interior of a ```json fenced block
    2. interior of any fenced block
    3. first "{" through last "}" inclusive
    4. "" when none of the above applies
    """
    if not text:
        return ""

    json_block = _JSON_FENCE_RE.search(text)
    if json_block:
        return json_block.group(1).strip()

    any_block = _ANY_FENCE_RE.search(text)
    if any_block:
        return any_block.group(1).strip()

    start = text.find('{')
    end = text.rfind('}')
    if start != -1 and end != -1 and start < end:
        return text[start:end + 1]

    return ""


def collapse_newlines(candidate: str) -> str:
    """Replace every run of CR/LF characters with a single space."""
    return _NEWLINES_RE.sub(' ', candidate)


def repair_json_text(candidate: str) -> str:
    """
    Apply the lightweight repairs LLM output usually needs.

    - literal newlines inside string values (collapsed to spaces)
    - stray control characters
    - trailing commas before } or ]
    """
    repaired = collapse_newlines(candidate)
    repaired = _CONTROL_CHARS_RE.sub('', repaired)
    repaired = _TRAILING_COMMA_RE.sub(r'\1', repaired)
    return repaired


def parse_recommendation_payload(text: str) -> Dict[str, Any]:
    """
    Turn raw Gemini text into the parsed JSON object.

    Args:
        text: Raw response text, possibly empty

    Returns:
        The parsed object, or {} when text is empty

    Raises:
        InvalidResponseFormatError: text is non-empty but holds no JSON candidate
        MalformedResponseError: a candidate was found but does not parse to an object
    """
    if not text:
        logger.warning("Gemini returned no text; degrading to an empty result")
        return {}

    candidate = extract_json_candidate(text)
    if not candidate:
        logger.error(f"No JSON found in Gemini response (chars={len(text)})")
        logger.debug(f"Raw content: {text[:500]}")
        raise InvalidResponseFormatError()

    try:
        payload = json.loads(collapse_newlines(candidate), strict=False)
    except json.JSONDecodeError:
        # Repairs can alter string values; only applied when the text fails as-is
        logger.warning("Gemini JSON did not parse as-is; retrying with repairs")
        try:
            payload = json.loads(repair_json_text(candidate), strict=False)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            logger.debug(f"Raw content: {text[:500]}")
            raise MalformedResponseError(f"Malformed AI response: {e.msg}") from e

    if not isinstance(payload, dict):
        logger.error(f"Parsed JSON is a {type(payload).__name__}, expected an object")
        raise MalformedResponseError("Malformed AI response: expected a JSON object.")

    return payload
