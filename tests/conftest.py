"""Shared pytest fixtures for prompt-forge tests."""

import pytest

from prompt_forge.adapters import MemoryUserRepository
from prompt_forge.core.workspace import Workspace
from tests.mocks.providers import (
    MockGenerationProvider,
    MockTokenSource,
    RecordingClipboard,
    RecordingNotifier,
)


@pytest.fixture
def mock_provider() -> MockGenerationProvider:
    """Provide a mock generation provider with a default refined prompt.

    For tests requiring specific payloads, create the mock directly:

        provider = MockGenerationProvider(responses=[{"refinedPrompt": "..."}])
    """
    return MockGenerationProvider()


@pytest.fixture
def token_source() -> MockTokenSource:
    return MockTokenSource()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clipboard() -> RecordingClipboard:
    return RecordingClipboard()


@pytest.fixture
def workspace(
    mock_provider: MockGenerationProvider,
    token_source: MockTokenSource,
    notifier: RecordingNotifier,
    clipboard: RecordingClipboard,
) -> Workspace:
    """Provide a Workspace wired to the default mocks."""
    return Workspace(
        provider=mock_provider,
        token_source=token_source,
        notifier=notifier,
        clipboard=clipboard,
    )


@pytest.fixture
def user_repository() -> MemoryUserRepository:
    """Provide an empty in-memory user repository."""
    return MemoryUserRepository()
