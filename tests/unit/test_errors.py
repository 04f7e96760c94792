"""Tests for the error taxonomy and classification."""

import asyncio

import pytest

from prompt_forge.core.errors import (
    AntiAbuseTokenError,
    ClipboardError,
    ErrorCategory,
    ModelInvocationError,
    PromptForgeError,
    ValidationError,
    classify_error,
)


class TestErrorTypes:
    """Tests for the PromptForgeError hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError({"idea_text": "Prompt idea is required."}),
            AntiAbuseTokenError("refine_prompt", "no token"),
            ModelInvocationError("Failed to refine prompt: boom"),
            ClipboardError("denied"),
        ],
    )
    def test_all_derive_from_base(self, error: PromptForgeError) -> None:
        assert isinstance(error, PromptForgeError)
        assert error.message

    def test_validation_error_keeps_fields(self) -> None:
        error = ValidationError({"idea_text": "Prompt idea is required."})
        assert error.field_errors == {"idea_text": "Prompt idea is required."}

    def test_anti_abuse_message_hides_reason(self) -> None:
        error = AntiAbuseTokenError("refine_prompt", "invalid-input-secret")
        assert error.message == AntiAbuseTokenError.USER_MESSAGE
        assert "invalid-input-secret" not in str(error)
        assert error.reason == "invalid-input-secret"
        assert error.action == "refine_prompt"


class TestModelInvocationError:
    """Tests for ModelInvocationError.from_exception()."""

    def test_prefixes_detail(self) -> None:
        original = RuntimeError("Rate limit exceeded")
        error = ModelInvocationError.from_exception(original, "Failed to refine prompt")
        assert error.message == "Failed to refine prompt: Rate limit exceeded"
        assert error.category == ErrorCategory.RATE_LIMIT
        assert error.original_error is original

    def test_blank_detail(self) -> None:
        error = ModelInvocationError.from_exception(
            RuntimeError("   "), "Failed to refine prompt"
        )
        assert error.message == "Failed to refine prompt due to an unknown error."
        assert error.category == ErrorCategory.UNKNOWN

    def test_default_category(self) -> None:
        assert ModelInvocationError("x").category == ErrorCategory.UNKNOWN


class TestClassifyError:
    """Tests for classify_error()."""

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (TimeoutError("Operation timed out"), ErrorCategory.TIMEOUT),
            (asyncio.TimeoutError(), ErrorCategory.TIMEOUT),
            (Exception("Request timeout"), ErrorCategory.TIMEOUT),
            (Exception("Connection refused"), ErrorCategory.NETWORK),
            (Exception("Rate limit exceeded"), ErrorCategory.RATE_LIMIT),
            (Exception("HTTP 429"), ErrorCategory.RATE_LIMIT),
            (Exception("Error 529: Overloaded"), ErrorCategory.OVERLOADED),
            (Exception("503 Service Unavailable"), ErrorCategory.SERVICE_UNAVAILABLE),
            (Exception("502 Bad Gateway"), ErrorCategory.SERVICE_UNAVAILABLE),
            (Exception("401 Unauthorized"), ErrorCategory.AUTH_FAILURE),
            (Exception("Invalid API key"), ErrorCategory.AUTH_FAILURE),
            (Exception("response missing required field"), ErrorCategory.CONTRACT_VIOLATION),
            (Exception("output did not match schema"), ErrorCategory.CONTRACT_VIOLATION),
            (Exception("400 Bad Request"), ErrorCategory.INVALID_INPUT),
            (Exception("not configured"), ErrorCategory.CONFIGURATION),
            (Exception("Something weird"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_classification(self, error: Exception, category: ErrorCategory) -> None:
        assert classify_error(error) == category
