"""Core prompt workspace logic.

This package contains the platform-agnostic pieces of the service: form
validation, instruction building, model invocation, anti-abuse verification
and the workspace state machine. Nothing here imports FastAPI.
"""

from prompt_forge.core.errors import (
    AntiAbuseTokenError,
    ClipboardError,
    ModelInvocationError,
    PromptForgeError,
    ValidationError,
)
from prompt_forge.core.parameters import RefinementRequest, SuggestionRequest
from prompt_forge.core.refinement import ParameterSuggestion, RefinementResult
from prompt_forge.core.workspace import Workspace, WorkspaceState

__all__ = [
    "AntiAbuseTokenError",
    "ClipboardError",
    "ModelInvocationError",
    "ParameterSuggestion",
    "PromptForgeError",
    "RefinementRequest",
    "RefinementResult",
    "SuggestionRequest",
    "ValidationError",
    "Workspace",
    "WorkspaceState",
]
