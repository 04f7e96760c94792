"""Mock implementations for testing."""

from tests.mocks.providers import (
    MockGenerationProvider,
    MockTokenSource,
    MockTokenVerifier,
    RecordingClipboard,
    RecordingNotifier,
)

__all__ = [
    "MockGenerationProvider",
    "MockTokenSource",
    "MockTokenVerifier",
    "RecordingClipboard",
    "RecordingNotifier",
]
