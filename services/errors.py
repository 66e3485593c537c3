"""Error taxonomy shared by the interview services and the HTTP layer."""
from __future__ import annotations

from typing import Optional


class InterviewError(Exception):  # Base error carrying an HTTP status
    status_code = 500

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(InterviewError):  # Missing or malformed input
    status_code = 400


class NotFound(InterviewError):  # No data stored for the requested key
    status_code = 404


class BudgetExceeded(InterviewError):  # Token budget guard tripped
    status_code = 429


class LimitExceeded(InterviewError):  # Per-task coaching cap reached
    status_code = 400


class UpstreamError(InterviewError):  # Model or store call failed
    status_code = 500


__all__ = [
    "InterviewError",
    "ValidationError",
    "NotFound",
    "BudgetExceeded",
    "LimitExceeded",
    "UpstreamError",
]
