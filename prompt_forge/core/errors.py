"""Error taxonomy for the prompt workspace.

Every error the workspace surfaces derives from PromptForgeError and carries a
user-facing message. Raw exceptions from collaborators (the model SDK, the
verification endpoint) are classified for diagnostic logging only; nothing is
retried.

Example:
    from prompt_forge.core.errors import ModelInvocationError, classify_error

    try:
        payload = await provider.generate_structured(...)
    except Exception as ex:
        raise ModelInvocationError.from_exception(ex, "Failed to refine prompt") from ex
"""

import asyncio
from enum import Enum, auto


class ErrorCategory(Enum):
    """Classification of raw collaborator errors for diagnostics."""

    RATE_LIMIT = auto()  # API rate limiting
    TIMEOUT = auto()  # Request/operation timeout
    NETWORK = auto()  # Network connectivity issues
    SERVICE_UNAVAILABLE = auto()  # Temporary service outage (5xx)
    OVERLOADED = auto()  # Server overloaded (529)
    INVALID_INPUT = auto()  # Bad request data (4xx)
    AUTH_FAILURE = auto()  # Authentication/authorization error
    CONTRACT_VIOLATION = auto()  # Response did not match the declared schema
    CONFIGURATION = auto()  # Missing configuration or setup issue
    UNKNOWN = auto()  # Unclassified error


class PromptForgeError(Exception):
    """Base class for errors surfaced to the workspace.

    Attributes:
        message: User-facing description of the failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PromptForgeError):
    """Form input failed validation; no network call was made.

    Attributes:
        field_errors: Error messages keyed by form field name.
    """

    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__("Please correct the highlighted fields.")
        self.field_errors = field_errors


class AntiAbuseTokenError(PromptForgeError):
    """A one-time verification token could not be obtained or verified.

    Attributes:
        action: The action name the token was requested for.
        reason: Diagnostic reason, never shown to the user.
    """

    USER_MESSAGE = "Verification service is unavailable. Please try again later."

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(self.USER_MESSAGE)
        self.action = action
        self.reason = reason


class ModelInvocationError(PromptForgeError):
    """The generative model call failed or broke its output contract.

    Attributes:
        category: Diagnostic classification of the underlying failure.
        original_error: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    @classmethod
    def from_exception(cls, ex: Exception, prefix: str) -> "ModelInvocationError":
        """Wrap a raw exception as '<prefix>: <detail>'."""
        detail = str(ex).strip()
        if detail:
            message = f"{prefix}: {detail}"
        else:
            message = f"{prefix} due to an unknown error."
        return cls(message=message, category=classify_error(ex), original_error=ex)


class ClipboardError(PromptForgeError):
    """Copying text to the clipboard failed. Logged, never shown."""


# Checked in order; the first category with a matching alternative wins.
# Each alternative lists substrings that must all occur in the message.
_MESSAGE_RULES: tuple[tuple[ErrorCategory, tuple[tuple[str, ...], ...]], ...] = (
    (ErrorCategory.TIMEOUT, (("timed out",), ("timeout",))),
    (ErrorCategory.NETWORK, (("connection",), ("network",))),
    (ErrorCategory.RATE_LIMIT, (("rate", "limit"), ("429",), ("too many requests",))),
    (ErrorCategory.OVERLOADED, (("529",), ("overloaded",))),
    (
        ErrorCategory.SERVICE_UNAVAILABLE,
        (("503",), ("service unavailable",), ("502",), ("bad gateway",)),
    ),
    (
        ErrorCategory.AUTH_FAILURE,
        (
            ("401",),
            ("unauthorized",),
            ("403",),
            ("forbidden",),
            ("api key",),
            ("authentication",),
        ),
    ),
    (ErrorCategory.CONTRACT_VIOLATION, (("missing", "field"), ("schema",))),
    (ErrorCategory.INVALID_INPUT, (("400",), ("bad request",), ("invalid",))),
    (
        ErrorCategory.CONFIGURATION,
        (("configuration",), ("not configured",), ("missing", "key"), ("missing", "env")),
    ),
)


def classify_error(error: Exception) -> ErrorCategory:
    """Classify a raw collaborator exception for diagnostic logging."""
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT

    text = str(error).lower()
    for category, alternatives in _MESSAGE_RULES:
        if any(all(part in text for part in parts) for parts in alternatives):
            return category
    return ErrorCategory.UNKNOWN
