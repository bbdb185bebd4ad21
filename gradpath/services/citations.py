"""
Merge grounding citations across one or more Gemini calls.

One entry per URI, first-seen title wins, order of first appearance kept.
"""

from typing import Any, Iterable, List, Mapping, Union

from gradpath.schemas.recommendations import CitationLink

CitationLike = Union[CitationLink, Mapping[str, Any]]


def _as_citation(item: CitationLike) -> CitationLink:
    if isinstance(item, CitationLink):
        return item
    title = item.get("title")
    uri = item.get("uri")
    return CitationLink(
        title=title if isinstance(title, str) else "",
        uri=uri if isinstance(uri, str) else "",
    )


def dedupe_citations(*groups: Iterable[CitationLike]) -> List[CitationLink]:
    """
    Deduplicate citation links by URI.

    Args:
        *groups: Any number of citation sequences, e.g. the links accumulated
            so far followed by the links of a "load more" call

    Returns:
        List of CitationLink with unique, non-empty URIs
    """
    unique = {}
    for group in groups:
        for item in group:
            citation = _as_citation(item)
            if not citation.uri or citation.uri in unique:
                continue
            unique[citation.uri] = citation
    return list(unique.values())
