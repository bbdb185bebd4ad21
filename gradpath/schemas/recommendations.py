"""
Pydantic schemas for the recommendation pipeline and its endpoints.

Domain records (SupervisorMatch, ProgramMatch, CitationLink,
RecommendationBatch) are produced by the result normalizer from whatever JSON
Gemini returned. Request models define the HTTP contracts of
/recommendations/*.

All models serialise with camelCase aliases so the frontend receives the same
shape the browser client expects.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gradpath.schemas.profile import StudentProfile


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# DOMAIN MODELS
# ============================================================================

class SupervisorMatch(CamelModel):
    """
    A potential supervisor found through grounded web search.

    Created once by the normalizer; only its membership in a session's
    liked set changes afterwards.
    """
    id: str = Field(
        ...,
        description="Synthetic identifier assigned at normalization time",
        examples=["k3j9x0a2b"]
    )
    name: str = Field(..., description="Professor's name", examples=["Jane Smith"])
    university: str = Field(..., description="Institution", examples=["MIT"])
    department: str = Field(
        ...,
        description="Department or school",
        examples=["EECS"]
    )
    research_area: str = Field(
        ...,
        description="Specific research focus of the lab",
        examples=["Geometric deep learning"]
    )
    match_reason: str = Field(
        ...,
        description="Brief explanation of fit, written by the model"
    )
    match_score: int = Field(
        ...,
        description="Estimated fit, 0-100, not independently verified",
        ge=0,
        le=100,
        examples=[92]
    )
    website_url: str = Field(
        ...,
        description=(
            "Lab or faculty page. Falls back to a Google search URL when the "
            "model did not supply an absolute link."
        ),
        examples=["https://people.csail.mit.edu/jsmith"]
    )
    recent_paper: Optional[str] = Field(
        None,
        description="Title of a recent paper, when the model found one"
    )


class ProgramMatch(CamelModel):
    """A graduate program found through grounded web search."""
    id: str = Field(..., description="Synthetic identifier")
    university: str = Field(..., description="Institution", examples=["ETH Zurich"])
    program_name: str = Field(
        ...,
        description="Program name",
        examples=["MSc Computer Science"]
    )
    degree: str = Field(
        ...,
        description="Degree awarded, usually mirrors the requested target degree",
        examples=["Masters", "PhD"]
    )
    focus: str = Field(..., description="Lab, track or specialisation")
    match_reason: str = Field(..., description="Why this program fits")
    match_score: int = Field(..., description="Estimated fit, 0-100", ge=0, le=100)
    website_url: str = Field(
        ...,
        description="Program page or a Google search URL fallback"
    )


class CitationLink(CamelModel):
    """A source link returned by the Google Search grounding tool."""
    title: str = Field(..., description="Page title", examples=["Jane Smith - MIT CSAIL"])
    uri: str = Field(..., description="Source URI (unique within a collection)")


class RecommendationBatch(CamelModel):
    """
    Normalized output of one pipeline run.

    Not persisted; owned by the caller (an HTTP response or a session).
    """
    supervisors: List[SupervisorMatch] = Field(default_factory=list)
    programs: List[ProgramMatch] = Field(default_factory=list)
    general_advice: str = Field(
        ...,
        description="Strategic advice paragraph, or a fixed placeholder"
    )
    grounding_links: List[CitationLink] = Field(
        default_factory=list,
        description="Deduplicated grounding citations"
    )


# ============================================================================
# REQUEST / RESPONSE MODELS
# ============================================================================

class RecommendationQueryRequest(CamelModel):
    """
    Request to run one recommendation search.

    Exclusion lists are used by "load more" flows: the model is asked to skip
    names the user has already seen.
    """
    profile: StudentProfile
    exclude_supervisors: List[str] = Field(
        default_factory=list,
        description="Supervisor names to avoid",
        examples=[["Jane Smith", "John Doe"]]
    )
    exclude_programs: List[str] = Field(
        default_factory=list,
        description="Program names to avoid",
        examples=[["MSc Computer Science"]]
    )


class EmailDraftRequest(CamelModel):
    """Request to draft a cold outreach email to one supervisor."""
    professor_name: str = Field(..., min_length=1, max_length=200)
    university: str = Field(..., min_length=1, max_length=200)
    topic: str = Field(
        ...,
        description="Research topic to mention, usually the supervisor's research area",
        max_length=1000
    )
    profile: StudentProfile


class EmailDraftResponse(CamelModel):
    """
    Drafted email body.

    Drafting never fails at the HTTP level: on error the body is a
    placeholder string the frontend shows as-is.
    """
    email_draft: str
