"""Error taxonomy for the AI proxy.

Every error carries the ``error`` label and ``message`` that end up in the JSON
body returned to the browser client, plus the HTTP status it maps to.
"""
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

from fastapi import status

# Substrings a provider message is matched against when the exception type
# itself does not say what went wrong. Matching is case-sensitive.
TIMEOUT_MARKER = "timeout"
RATE_LIMIT_MARKER = "rate limit"
CONNECTION_MARKER = "connection"


class ErrorCategory(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    CONNECTION = "connection"
    EMPTY_RESPONSE = "empty_response"
    PROVIDER = "provider"


class CategoryPolicy(NamedTuple):
    status_code: int
    retryable: bool


CATEGORY_POLICIES: Dict[ErrorCategory, CategoryPolicy] = {
    ErrorCategory.TIMEOUT: CategoryPolicy(status.HTTP_503_SERVICE_UNAVAILABLE, True),
    ErrorCategory.RATE_LIMIT: CategoryPolicy(status.HTTP_503_SERVICE_UNAVAILABLE, True),
    ErrorCategory.CONNECTION: CategoryPolicy(status.HTTP_503_SERVICE_UNAVAILABLE, True),
    ErrorCategory.EMPTY_RESPONSE: CategoryPolicy(status.HTTP_500_INTERNAL_SERVER_ERROR, False),
    ErrorCategory.PROVIDER: CategoryPolicy(status.HTTP_500_INTERNAL_SERVER_ERROR, False),
}


def categorize_message(message: Optional[str]) -> ErrorCategory:
    """Fall back to the message text to pick a category."""
    if not message:
        return ErrorCategory.PROVIDER
    if TIMEOUT_MARKER in message:
        return ErrorCategory.TIMEOUT
    if RATE_LIMIT_MARKER in message:
        return ErrorCategory.RATE_LIMIT
    if CONNECTION_MARKER in message:
        return ErrorCategory.CONNECTION
    return ErrorCategory.PROVIDER


class DocHelperError(Exception):
    """Base class for errors that are rendered as a JSON error body."""

    error = "Internal error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ConfigurationError(DocHelperError):
    """A required credential is missing. Fatal to client initialization only."""

    error = "Configuration error"


class ValidationError(DocHelperError):
    """The request text is missing, empty or too long."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, message: str) -> None:
        super().__init__(message)
        self.error = error


class UpstreamUnavailable(DocHelperError):
    error = "AI service unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(
        self,
        message: str = "The AI service is not properly initialized. Please try again later.",
    ) -> None:
        super().__init__(message)


class UpstreamRequestError(DocHelperError):
    """The provider call raised or produced no content."""

    error = "AI service error"

    def __init__(self, message: str, category: ErrorCategory) -> None:
        super().__init__(message)
        self.category = category

    @property
    def retryable(self) -> bool:
        return CATEGORY_POLICIES[self.category].retryable

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return CATEGORY_POLICIES[self.category].status_code

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["retryable"] = self.retryable
        return body
