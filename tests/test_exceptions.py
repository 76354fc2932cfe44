"""Tests for the error taxonomy and its status/retryability mapping."""
import pytest

from core.exceptions import (
    CATEGORY_POLICIES,
    ErrorCategory,
    UpstreamRequestError,
    UpstreamUnavailable,
    ValidationError,
    categorize_message,
)


@pytest.mark.parametrize(
    "message,category",
    [
        ("socket timeout", ErrorCategory.TIMEOUT),
        ("rate limit reached for model", ErrorCategory.RATE_LIMIT),
        ("connection refused", ErrorCategory.CONNECTION),
        ("Rate Limit reached", ErrorCategory.PROVIDER),
        ("invalid api key", ErrorCategory.PROVIDER),
        ("", ErrorCategory.PROVIDER),
        (None, ErrorCategory.PROVIDER),
    ],
)
def test_categorize_message(message, category):
    assert categorize_message(message) is category


def test_every_category_has_a_policy():
    assert set(CATEGORY_POLICIES) == set(ErrorCategory)


@pytest.mark.parametrize(
    "category,status_code,retryable",
    [
        (ErrorCategory.TIMEOUT, 503, True),
        (ErrorCategory.RATE_LIMIT, 503, True),
        (ErrorCategory.CONNECTION, 503, True),
        (ErrorCategory.EMPTY_RESPONSE, 500, False),
        (ErrorCategory.PROVIDER, 500, False),
    ],
)
def test_upstream_request_error_policy(category, status_code, retryable):
    exc = UpstreamRequestError("upstream failed", category)

    assert exc.status_code == status_code
    assert exc.retryable is retryable
    assert exc.to_dict() == {"error": "AI service error", "message": "upstream failed", "retryable": retryable}


def test_validation_error_body():
    exc = ValidationError("Missing text", "Please provide text to format")

    assert exc.status_code == 400
    assert exc.to_dict() == {"error": "Missing text", "message": "Please provide text to format"}


def test_upstream_unavailable_default_message():
    exc = UpstreamUnavailable()

    assert exc.status_code == 503
    assert exc.to_dict()["error"] == "AI service unavailable"
