"""
In-memory recommendation sessions.

A session owns everything the frontend accumulates while browsing results:
the submitted profile, supervisors and programs from every search round,
the merged grounding links, and the liked-item sets. The recommendation
pipeline itself stays stateless; this module is pure bookkeeping around it.

Sessions are kept in process memory and are lost on restart. The store
evicts idle sessions and caps how many it holds (see SessionStore).
"""

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Set

from gradpath.config import settings
from gradpath.schemas.profile import StudentProfile
from gradpath.schemas.recommendations import CitationLink, ProgramMatch, SupervisorMatch
from gradpath.schemas.sessions import SavedItemsResponse, SessionResponse
from gradpath.services.citations import dedupe_citations
from gradpath.services.exceptions import (
    MatchNotFoundError,
    SessionBusyError,
    SessionNotFoundError,
    SessionStateError,
)
from gradpath.services.recommendation_service import fetch_recommendations
from gradpath.services.result_normalizer import IdGenerator, generate_match_id

logger = logging.getLogger(__name__)


class RecommendationSession:
    """Accumulated results and liked items for one user journey."""

    def __init__(self, session_id: Optional[str] = None, id_generator: IdGenerator = generate_match_id):
        self.id = session_id or uuid.uuid4().hex
        self.id_generator = id_generator
        self.profile: Optional[StudentProfile] = None
        self.supervisors: List[SupervisorMatch] = []
        self.programs: List[ProgramMatch] = []
        self.general_advice = ""
        self.grounding_links: List[CitationLink] = []
        self.liked_supervisor_ids: Set[str] = set()
        self.liked_program_ids: Set[str] = set()
        self.is_loading_more = False

    def _known_ids(self) -> Set[str]:
        return {s.id for s in self.supervisors} | {p.id for p in self.programs}

    async def start(self, profile: StudentProfile) -> None:
        """
        Run the first search for a profile, replacing any previous results.

        On failure the session is left with the new profile and empty results,
        and the pipeline error propagates.
        """
        self.profile = profile
        self.supervisors = []
        self.programs = []
        self.general_advice = ""
        self.grounding_links = []
        self.liked_supervisor_ids = set()
        self.liked_program_ids = set()

        batch = await fetch_recommendations(profile, id_generator=self.id_generator)

        self.supervisors = list(batch.supervisors)
        self.programs = list(batch.programs)
        self.general_advice = batch.general_advice
        self.grounding_links = list(batch.grounding_links)
        logger.info(
            f"Session {self.id} started with {len(self.supervisors)} supervisors, "
            f"{len(self.programs)} programs"
        )

    async def load_more(self) -> None:
        """
        Fetch another round, excluding every name already shown.

        New matches are appended; citations are re-deduplicated over old + new.
        On failure the accumulated state is left untouched.

        Raises:
            SessionStateError: no profile has been submitted yet, or the session
                was reset while the search was running
            SessionBusyError: another load_more is still running
        """
        if self.profile is None:
            raise SessionStateError("Submit a profile before loading more results.")
        if self.is_loading_more:
            raise SessionBusyError("Already loading more results for this session.")

        profile = self.profile
        self.is_loading_more = True
        try:
            batch = await fetch_recommendations(
                profile,
                exclude_supervisors=[s.name for s in self.supervisors],
                exclude_programs=[p.program_name for p in self.programs],
                id_generator=self.id_generator,
                reserved_ids=self._known_ids(),
            )
        finally:
            self.is_loading_more = False

        if self.profile is not profile:
            logger.info(f"Session {self.id} changed during load more; discarding results")
            raise SessionStateError("Session was reset while loading more results.")

        self.supervisors.extend(batch.supervisors)
        self.programs.extend(batch.programs)
        self.grounding_links = dedupe_citations(self.grounding_links, batch.grounding_links)
        logger.info(
            f"Session {self.id} loaded {len(batch.supervisors)} more supervisors, "
            f"{len(batch.programs)} more programs"
        )

    def toggle_supervisor_like(self, match_id: str) -> bool:
        """Flip the liked state of a supervisor; returns the new state."""
        if not any(s.id == match_id for s in self.supervisors):
            raise MatchNotFoundError(f"Supervisor {match_id} not found in session.")
        return _toggle(self.liked_supervisor_ids, match_id)

    def toggle_program_like(self, match_id: str) -> bool:
        """Flip the liked state of a program; returns the new state."""
        if not any(p.id == match_id for p in self.programs):
            raise MatchNotFoundError(f"Program {match_id} not found in session.")
        return _toggle(self.liked_program_ids, match_id)

    @property
    def saved_supervisors(self) -> List[SupervisorMatch]:
        return [s for s in self.supervisors if s.id in self.liked_supervisor_ids]

    @property
    def saved_programs(self) -> List[ProgramMatch]:
        return [p for p in self.programs if p.id in self.liked_program_ids]

    @property
    def saved_count(self) -> int:
        return len(self.saved_supervisors) + len(self.saved_programs)

    def reset(self) -> None:
        """Forget the profile, all results and all likes."""
        self.profile = None
        self.supervisors = []
        self.programs = []
        self.general_advice = ""
        self.grounding_links = []
        self.liked_supervisor_ids = set()
        self.liked_program_ids = set()

    def to_response(self) -> SessionResponse:
        # Liked ids are listed in result order so responses are stable
        return SessionResponse(
            id=self.id,
            profile=self.profile,
            supervisors=self.supervisors,
            programs=self.programs,
            general_advice=self.general_advice,
            grounding_links=self.grounding_links,
            liked_supervisor_ids=[s.id for s in self.saved_supervisors],
            liked_program_ids=[p.id for p in self.saved_programs],
            saved_count=self.saved_count,
            is_loading_more=self.is_loading_more,
        )

    def saved_items(self) -> SavedItemsResponse:
        return SavedItemsResponse(
            supervisors=self.saved_supervisors,
            programs=self.saved_programs,
            count=self.saved_count,
        )


def _toggle(liked: Set[str], match_id: str) -> bool:
    if match_id in liked:
        liked.remove(match_id)
        return False
    liked.add(match_id)
    return True


class SessionStore:
    """
    Process-wide registry of sessions keyed by id.

    Sessions are kept in least-recently-used order. Sessions idle for longer
    than ttl_seconds are evicted on create() and get(), and create() evicts
    the least recently used session once max_sessions is reached. A value of
    0 disables either bound.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = settings.SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.max_sessions = settings.MAX_SESSIONS if max_sessions is None else max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, RecommendationSession]" = OrderedDict()
        self._last_access: Dict[str, float] = {}

    def _touch(self, session_id: str) -> None:
        self._sessions.move_to_end(session_id)
        self._last_access[session_id] = self._clock()

    def _evict(self, session_id: str, reason: str) -> None:
        session = self._sessions.pop(session_id)
        del self._last_access[session_id]
        session.reset()
        logger.info(f"Session {session_id} evicted ({reason})")

    def _evict_expired(self) -> None:
        if not self.ttl_seconds:
            return
        cutoff = self._clock() - self.ttl_seconds
        while self._sessions:
            oldest_id = next(iter(self._sessions))
            if self._last_access[oldest_id] > cutoff:
                break
            self._evict(oldest_id, "idle")

    def create(self) -> RecommendationSession:
        self._evict_expired()
        if self.max_sessions:
            while len(self._sessions) >= self.max_sessions:
                self._evict(next(iter(self._sessions)), "capacity")

        session = RecommendationSession()
        self._sessions[session.id] = session
        self._touch(session.id)
        return session

    def get(self, session_id: str) -> RecommendationSession:
        self._evict_expired()
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session {session_id} not found.") from None
        self._touch(session_id)
        return session

    def delete(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise SessionNotFoundError(f"Session {session_id} not found.")
        session = self._sessions.pop(session_id)
        del self._last_access[session_id]
        session.reset()

    def clear(self) -> None:
        self._sessions.clear()
        self._last_access.clear()

    def __len__(self) -> int:
        return len(self._sessions)


session_store = SessionStore()
