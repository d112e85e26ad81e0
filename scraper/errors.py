"""
Error taxonomy shared by the pipeline and the HTTP layer.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Codes surfaced to API callers."""
    INVALID_URL = "INVALID_URL"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    NOT_FOUND = "NOT_FOUND"


class ScrapeError(Exception):
    """
    Base class for categorized pipeline failures.

    ``message`` is safe to show to the caller. ``cause`` keeps the original
    exception for logging and is never serialized.
    """

    code = ErrorCode.PARSE_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.cause = cause

    def __str__(self):
        return f"{self.code.value}: {self.message}"


class InvalidRequestError(ScrapeError):
    """The inbound request body is malformed."""
    code = ErrorCode.INVALID_URL


class InvalidUrlError(ScrapeError):
    """The submitted URL is not a recognised profile URL."""
    code = ErrorCode.INVALID_URL


class FetchError(ScrapeError):
    """The profile page could not be retrieved after all attempts."""
    code = ErrorCode.NETWORK_ERROR
