"""Errors raised across the megaverse domain.

Only GoalMapFetchError is meant to reach the top level; the others are
contained by the component that detects them.
"""

from typing import Optional


class MegaverseError(Exception):
    """Base class for all megaverse errors."""


class GoalMapFetchError(MegaverseError):
    """The goal map could not be fetched or had an unexpected shape."""


class GoalMapDecodeError(MegaverseError):
    """A goal map cell label is not recognized (strict decoding only)."""

    def __init__(self, label: str, row: int, column: int):
        self.label = label
        self.row = row
        self.column = column
        super().__init__(f"Unrecognized goal label {label!r} at ({row}, {column})")


class MegaverseApiError(MegaverseError):
    """The API answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class RateLimitedError(MegaverseApiError):
    """The API throttled the request; safe to retry after a delay."""


class MaxRetryError(MegaverseError):
    """Exception raised when max retries are exceeded."""

    def __init__(self, original_exception: Exception, attempts: int):
        self.original_exception = original_exception
        self.attempts = attempts
        super().__init__(f"Max retries ({attempts}) exceeded. Last error: {original_exception}")
