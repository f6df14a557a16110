"""
Exception hierarchy for the interview engine.

Each class maps to one failure category so the orchestrator can turn it into
a job outcome without inspecting message strings.
"""

from typing import Optional


class InterviewError(Exception):
    """Base exception for all interview errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class TransientRequestError(InterviewError):
    """Network or 5xx failure that survived every retry."""


class ClientRequestError(InterviewError):
    """4xx response other than 404. Never retried."""

    def __init__(self, message: str, status: int, details: Optional[dict] = None):
        super().__init__(message, details)
        self.status = status


class ProtocolViolation(InterviewError):
    """Server returned a state combination the protocol does not allow."""


class IterationLimitExceeded(ProtocolViolation):
    """Group round-trips exceeded the safety cap."""


class RequiredQuestionUnresolved(InterviewError):
    """A required question could not be answered after all attempts."""

    def __init__(self, question_id: str, question_text: str, attempts: int):
        super().__init__(
            f'Cannot proceed: required question "{question_text}" could not be answered '
            f"after {attempts} attempt(s)",
            {"question_id": question_id, "attempts": attempts},
        )
        self.question_id = question_id


class JobSkipped(InterviewError):
    """Operator chose to skip the current job. Not a failure."""

    def __init__(self, message: str = "User chose to skip this job", question_id: str = ""):
        super().__init__(message, {"question_id": question_id} if question_id else None)
        self.question_id = question_id


class ConfigurationError(InterviewError):
    """Configuration is invalid or missing."""
