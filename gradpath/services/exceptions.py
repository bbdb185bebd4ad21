"""
Exceptions raised by the recommendation pipeline and session service.

The pipeline keeps three outcomes apart:
- the model could not be reached (RecommendationFetchError)
- the model answered with text that is not usable JSON
  (InvalidResponseFormatError, MalformedResponseError)
- the model answered with nothing at all (not an error, see response_parser)

Routes map each class to its own HTTP error code.
"""


class RecommendationError(Exception):
    """Base class for recommendation pipeline failures."""


class RecommendationFetchError(RecommendationError):
    """Transport or service failure while calling Gemini."""

    def __init__(
        self,
        message: str = "Failed to fetch recommendations. Please check your connection and try again.",
    ):
        super().__init__(message)


class InvalidResponseFormatError(RecommendationError):
    """Gemini returned text but no JSON object could be located in it."""

    def __init__(self, message: str = "AI response was not in valid JSON format."):
        super().__init__(message)


class MalformedResponseError(InvalidResponseFormatError):
    """A JSON candidate was located but could not be parsed into an object."""

    def __init__(self, message: str = "Malformed AI response."):
        super().__init__(message)


class SessionError(Exception):
    """Base class for session bookkeeping failures."""


class SessionNotFoundError(SessionError):
    """No session exists with the requested id."""


class MatchNotFoundError(SessionError):
    """No supervisor or program with the requested id exists in the session."""


class SessionBusyError(SessionError):
    """A "load more" request is already outstanding for this session."""


class SessionStateError(SessionError):
    """The session is not in a state that allows the operation."""
