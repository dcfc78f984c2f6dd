"""
Error taxonomy for the Interview Prep engine.

Every error the services raise derives from InterviewPrepError and carries the
HTTP status the API layer answers with.
"""
from typing import Optional


class InterviewPrepError(Exception):
    """Base class for all engine errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InterviewPrepError):
    """Bad caller input. Never retried."""

    status_code = 400


class PlanNotFound(InterviewPrepError):
    """Unknown plan id, or a plan owned by someone else."""

    status_code = 404


class ItemNotFound(InterviewPrepError):
    """Unknown embedded plan item or bank question."""

    status_code = 404


class SessionNotFound(InterviewPrepError):
    """Unknown session id, or a session that is already concluded."""

    status_code = 404


class StaleSessionWrite(InterviewPrepError):
    """The caller's session revision no longer matches the stored one."""

    status_code = 409


class ModelError(InterviewPrepError):
    """Base class for failures of the external text-generation service."""

    status_code = 502


class ModelUnavailable(ModelError):
    """
    The model could not be reached.

    `retryable` is True when transient failures exhausted the attempt budget,
    False when the service rejected the request outright (non-429 4xx).
    """

    def __init__(self, message: str, retryable: bool = True, attempts: int = 0,
                 last_status: Optional[int] = None):
        super().__init__(message)
        self.retryable = retryable
        self.attempts = attempts
        self.last_status = last_status

    @property
    def status_code(self) -> int:
        return 503 if self.retryable else 502


class MalformedResponse(ModelError):
    """The model answered with something that is not the expected JSON object."""

    status_code = 502

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        # Diagnostics only, never returned to the caller
        self.raw_text = raw_text


class ConcurrencyNoop(InterviewPrepError):
    """A conclude request hit a session that was already concluded. Logged, never returned."""


class ApiRequestError(InterviewPrepError):
    """The session API answered a client request with an error status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
