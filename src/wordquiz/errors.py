"""Error taxonomy surfaced by the quiz core."""
from wordquiz.monitoring import error_count


class QuizError(Exception):
    """Base class for errors a client can act on."""

    kind = "quiz_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        error_count.labels(error_type=self.kind).inc()


class NotFoundError(QuizError):
    """A referenced session or word does not exist, or the word pool is exhausted."""

    kind = "not_found"


class InvalidStateError(QuizError):
    """The session is in a state that forbids the requested operation."""

    kind = "invalid_state"


class ValidationError(QuizError):
    """Input was rejected before reaching the core."""

    kind = "validation_error"
