"""
Pydantic schemas for the in-memory recommendation session endpoints.

A session accumulates results across "load more" rounds and tracks which
supervisors and programs the user liked. Sessions live in process memory only.
"""

from typing import List, Optional

from pydantic import Field

from gradpath.schemas.profile import StudentProfile
from gradpath.schemas.recommendations import (
    CamelModel,
    CitationLink,
    ProgramMatch,
    SupervisorMatch,
)


class SessionCreateRequest(CamelModel):
    """Start a new session: runs the first search for the given profile."""
    profile: StudentProfile


class SessionResponse(CamelModel):
    """Full snapshot of a session's accumulated state."""
    id: str = Field(..., description="Session identifier")
    profile: Optional[StudentProfile] = None
    supervisors: List[SupervisorMatch] = Field(default_factory=list)
    programs: List[ProgramMatch] = Field(default_factory=list)
    general_advice: str = ""
    grounding_links: List[CitationLink] = Field(default_factory=list)
    liked_supervisor_ids: List[str] = Field(default_factory=list)
    liked_program_ids: List[str] = Field(default_factory=list)
    saved_count: int = 0
    is_loading_more: bool = False


class LikeToggleResponse(CamelModel):
    """Result of toggling a like on a supervisor or program."""
    id: str
    liked: bool


class SavedItemsResponse(CamelModel):
    """Liked supervisors and programs, in accumulation order."""
    supervisors: List[SupervisorMatch] = Field(default_factory=list)
    programs: List[ProgramMatch] = Field(default_factory=list)
    count: int = 0
