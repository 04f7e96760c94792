"""Workspace orchestrator: the state machine behind the prompt form.

States:
    IDLE --submit--> SUBMITTING --> SUCCESS | FAILED

Any terminal state is re-entered by a new submission; reset() returns to
IDLE. A submission runs two sequential steps, each returning a StepResult
and short-circuiting the pipeline on failure:

    1. acquire an anti-abuse token scoped to the action name
    2. invoke the model

Side effects (clipboard copy, notifications) go through injected ports so
the same orchestrator drives the HTTP API and the tests.

The orchestrator does not guard against a second submit while SUBMITTING;
callers disable the submit control instead.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from prompt_forge.core.anti_abuse import (
    REFINE_PROMPT_ACTION,
    SUGGEST_PARAMETERS_ACTION,
    TokenSource,
)
from prompt_forge.core.errors import (
    AntiAbuseTokenError,
    ClipboardError,
    ModelInvocationError,
    PromptForgeError,
    ValidationError,
)
from prompt_forge.core.logging import get_logger
from prompt_forge.core.parameters import (
    validate_refinement_form,
    validate_suggestion_form,
)
from prompt_forge.core.providers import GenerationProvider
from prompt_forge.core.refinement import (
    REFINE_FAILURE_PREFIX,
    SUGGEST_FAILURE_PREFIX,
    ParameterSuggestion,
    RefinementResult,
    refine_prompt,
    suggest_parameters,
)

logger = get_logger(__name__)

T = TypeVar("T")

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class WorkspaceState(Enum):
    """Lifecycle of a single submission."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class Notification:
    """A transient user-visible message (toast)."""

    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"


class Notifier(Protocol):
    """Port for showing transient notifications."""

    def notify(self, notification: Notification) -> None:
        ...


class Clipboard(Protocol):
    """Port for writing text to the user's clipboard."""

    async def write_text(self, text: str) -> None:
        """Write text to the clipboard.

        Raises:
            Exception: Any failure; callers treat copying as best-effort.
        """
        ...


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Outcome of one pipeline step: a value or an error, never both."""

    value: T | None = None
    error: PromptForgeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class WorkspaceSnapshot:
    """Serializable view of the workspace state."""

    state: WorkspaceState
    refined_prompt: str | None = None
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    suggestion: ParameterSuggestion | None = None
    suggestion_state: WorkspaceState = WorkspaceState.IDLE


class Workspace:
    """Coordinates validation, verification, model calls and UI side effects.

    Example:
        workspace = Workspace(provider, token_source, notifier, clipboard)
        await workspace.submit({"idea_text": "Write a story about a robot"})
        if workspace.state is WorkspaceState.SUCCESS:
            print(workspace.refined_prompt)
    """

    def __init__(
        self,
        provider: GenerationProvider,
        token_source: TokenSource,
        notifier: Notifier,
        clipboard: Clipboard,
    ) -> None:
        self._provider = provider
        self._token_source = token_source
        self._notifier = notifier
        self._clipboard = clipboard

        self.state = WorkspaceState.IDLE
        self.refined_prompt: str | None = None
        self.error: str | None = None
        self.field_errors: dict[str, str] = {}
        self.suggestion: ParameterSuggestion | None = None
        self.suggestion_state = WorkspaceState.IDLE
        # Typed error behind the last FAILED transition
        self.last_failure: PromptForgeError | None = None

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    async def _acquire_token(self, action: str) -> StepResult[str]:
        try:
            token = await self._token_source.acquire_token(action)
        except AntiAbuseTokenError as ex:
            logger.warning("anti_abuse_token_failed", action=action, reason=ex.reason)
            return StepResult(error=ex)
        except Exception as ex:
            logger.error("anti_abuse_token_error", action=action, error=str(ex))
            return StepResult(error=AntiAbuseTokenError(action, str(ex)))

        if not token:
            logger.warning("anti_abuse_token_empty", action=action)
            return StepResult(error=AntiAbuseTokenError(action, "empty token"))
        return StepResult(value=token)

    async def _run_model(
        self, call: Callable[[], Awaitable[T]], failure_prefix: str
    ) -> StepResult[T]:
        try:
            return StepResult(value=await call())
        except ModelInvocationError as ex:
            return StepResult(error=ex)
        except Exception as ex:
            logger.exception("model_step_unexpected_error")
            return StepResult(error=ModelInvocationError.from_exception(ex, failure_prefix))

    # ------------------------------------------------------------------
    # Refinement
    # ------------------------------------------------------------------

    async def submit(self, raw_form: Mapping[str, Any]) -> WorkspaceSnapshot:
        """Run one refinement submission.

        Args:
            raw_form: Form values (idea_text, style, length, tone,
                include_parameters).

        Returns:
            A snapshot of the state after the submission.
        """
        try:
            request = validate_refinement_form(raw_form)
        except ValidationError as ex:
            self.field_errors = ex.field_errors
            logger.info("refinement_form_invalid", fields=sorted(ex.field_errors))
            return self.snapshot()

        self.state = WorkspaceState.SUBMITTING
        self.error = None
        self.last_failure = None
        self.field_errors = {}
        self.refined_prompt = None

        token = await self._acquire_token(REFINE_PROMPT_ACTION)
        if not token.ok:
            self._fail(token.error, "Verification Error")
            return self.snapshot()

        outcome: StepResult[RefinementResult] = await self._run_model(
            lambda: refine_prompt(self._provider, request),
            REFINE_FAILURE_PREFIX,
        )
        if not outcome.ok or outcome.value is None:
            self._fail(outcome.error, "Error Generating Prompt")
            return self.snapshot()

        self.refined_prompt = outcome.value.refined_prompt
        self.state = WorkspaceState.SUCCESS
        self._notifier.notify(
            Notification(
                title="Prompt Forged!",
                description="Your new prompt has been successfully generated.",
            )
        )
        if await self._copy(self.refined_prompt):
            self._notifier.notify(
                Notification(
                    title="Prompt Auto-Copied!",
                    description="The generated prompt has been copied to your clipboard.",
                )
            )
        return self.snapshot()

    def _fail(self, error: PromptForgeError | None, title: str) -> None:
        message = error.message if error is not None else UNKNOWN_ERROR_MESSAGE
        self.state = WorkspaceState.FAILED
        self.last_failure = error
        self.error = message
        self.refined_prompt = None
        self._notifier.notify(
            Notification(title=title, description=message, variant="destructive")
        )

    async def _copy(self, text: str) -> bool:
        try:
            await self._clipboard.write_text(text)
        except Exception as ex:
            error = ClipboardError(f"Auto-copy failed: {ex}")
            logger.warning("clipboard_copy_failed", error=error.message)
            return False
        return True

    # ------------------------------------------------------------------
    # Parameter suggestions
    # ------------------------------------------------------------------

    async def suggest(self, raw_form: Mapping[str, Any]) -> WorkspaceSnapshot:
        """Ask the model for style/length/tone suggestions for an idea.

        Uses the same two-step pipeline under the "suggest_parameters"
        action. Tracks its own state so it never clobbers a refined prompt.
        """
        try:
            request = validate_suggestion_form(raw_form)
        except ValidationError as ex:
            self.field_errors = ex.field_errors
            return self.snapshot()

        self.suggestion_state = WorkspaceState.SUBMITTING
        self.error = None
        self.last_failure = None
        self.field_errors = {}
        self.suggestion = None

        token = await self._acquire_token(SUGGEST_PARAMETERS_ACTION)
        if not token.ok:
            self._fail_suggestion(token.error, "Verification Error")
            return self.snapshot()

        outcome: StepResult[ParameterSuggestion] = await self._run_model(
            lambda: suggest_parameters(self._provider, request),
            SUGGEST_FAILURE_PREFIX,
        )
        if not outcome.ok or outcome.value is None:
            self._fail_suggestion(outcome.error, "Error Suggesting Parameters")
            return self.snapshot()

        self.suggestion = outcome.value
        self.suggestion_state = WorkspaceState.SUCCESS
        self._notifier.notify(
            Notification(
                title="Parameters Suggested!",
                description="AI has suggested new parameters for your prompt.",
            )
        )
        if self.suggestion.reasoning:
            self._notifier.notify(
                Notification(
                    title="AI Reasoning for Suggestions",
                    description=(
                        f"Style: {self.suggestion.suggested_style}\n"
                        f"Length: {self.suggestion.suggested_length}\n"
                        f"Tone: {self.suggestion.suggested_tone}\n"
                        f"Reasoning: {self.suggestion.reasoning}"
                    ),
                )
            )
        return self.snapshot()

    def _fail_suggestion(self, error: PromptForgeError | None, title: str) -> None:
        message = error.message if error is not None else UNKNOWN_ERROR_MESSAGE
        self.suggestion_state = WorkspaceState.FAILED
        self.last_failure = error
        self.error = message
        self._notifier.notify(
            Notification(title=title, description=message, variant="destructive")
        )

    # ------------------------------------------------------------------
    # Result affordances
    # ------------------------------------------------------------------

    def edit_result(self, text: str) -> None:
        """Replace the refined prompt with the user's edited text.

        Raises:
            RuntimeError: If there is no refined prompt to edit.
        """
        if self.state is not WorkspaceState.SUCCESS:
            raise RuntimeError("No refined prompt to edit")
        self.refined_prompt = text

    async def copy_result(self) -> bool:
        """Copy the (possibly edited) refined prompt to the clipboard.

        Returns:
            True if the text was copied.
        """
        if not self.refined_prompt:
            return False
        if await self._copy(self.refined_prompt):
            self._notifier.notify(
                Notification(
                    title="Prompt Copied!",
                    description="The generated prompt has been copied to your clipboard.",
                )
            )
            return True
        self._notifier.notify(
            Notification(
                title="Copy Failed",
                description="Could not copy prompt to clipboard. Please try again.",
                variant="destructive",
            )
        )
        return False

    def reset(self) -> None:
        """Return to IDLE and drop any result, error or suggestion."""
        self.state = WorkspaceState.IDLE
        self.suggestion_state = WorkspaceState.IDLE
        self.refined_prompt = None
        self.error = None
        self.last_failure = None
        self.field_errors = {}
        self.suggestion = None

    def snapshot(self) -> WorkspaceSnapshot:
        return WorkspaceSnapshot(
            state=self.state,
            refined_prompt=self.refined_prompt,
            error=self.error,
            field_errors=dict(self.field_errors),
            suggestion=self.suggestion,
            suggestion_state=self.suggestion_state,
        )
