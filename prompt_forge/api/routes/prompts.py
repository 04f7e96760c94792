"""Prompt workspace routes.

Each request drives a fresh Workspace: the posted form is validated, the
reCAPTCHA token is verified for the action, and the model is invoked.
Notifications and the text to auto-copy are returned in the response for
the client to render.

Status codes:
    200: success
    422: form validation failed (see field_errors)
    502: the model call failed
    503: anti-abuse verification failed
"""

from fastapi import APIRouter, Depends, Request, Response, status

from prompt_forge.api.auth import AuthUser, get_current_user
from prompt_forge.api.dependencies import get_generation_provider, get_token_verifier
from prompt_forge.api.schemas import (
    NotificationResponse,
    ParameterOptionsResponse,
    RefineRequestBody,
    SuggestionResponse,
    SuggestRequestBody,
    WorkspaceResponse,
)
from prompt_forge.core.anti_abuse import PresentedTokenSource, TokenVerifier
from prompt_forge.core.errors import AntiAbuseTokenError, ModelInvocationError
from prompt_forge.core.logging import bind_contextvars, get_logger, unbind_contextvars
from prompt_forge.core.parameters import (
    DEFAULT_LENGTH,
    DEFAULT_STYLE,
    DEFAULT_TONE,
    LENGTH_OPTIONS,
    STYLE_OPTIONS,
    TONE_OPTIONS,
)
from prompt_forge.core.providers import GenerationProvider
from prompt_forge.core.workspace import Notification, Workspace, WorkspaceSnapshot

logger = get_logger(__name__)

router = APIRouter(prefix="/prompts", tags=["prompts"])

# starlette renamed HTTP_422_UNPROCESSABLE_ENTITY
FORM_ERROR_STATUS = 422


class ResponseNotifier:
    """Notifier that collects notifications for the HTTP response."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)


class ResponseClipboard:
    """Clipboard that hands the copied text back to the client.

    The server cannot reach the user's clipboard; the client writes
    clipboard_text itself.
    """

    def __init__(self) -> None:
        self.text: str | None = None

    async def write_text(self, text: str) -> None:
        self.text = text


def _status_for(workspace: Workspace, snapshot: WorkspaceSnapshot) -> int:
    if snapshot.field_errors:
        return FORM_ERROR_STATUS
    failure = workspace.last_failure
    if isinstance(failure, AntiAbuseTokenError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(failure, ModelInvocationError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_200_OK


def _to_response(
    snapshot: WorkspaceSnapshot,
    notifier: ResponseNotifier,
    clipboard: ResponseClipboard,
) -> WorkspaceResponse:
    suggestion = None
    if snapshot.suggestion is not None:
        suggestion = SuggestionResponse(
            suggested_style=snapshot.suggestion.suggested_style,
            suggested_length=snapshot.suggestion.suggested_length,
            suggested_tone=snapshot.suggestion.suggested_tone,
            reasoning=snapshot.suggestion.reasoning,
        )
    return WorkspaceResponse(
        state=snapshot.state.value,
        refined_prompt=snapshot.refined_prompt,
        error=snapshot.error,
        field_errors=snapshot.field_errors,
        suggestion=suggestion,
        suggestion_state=snapshot.suggestion_state.value,
        notifications=[
            NotificationResponse(
                title=n.title, description=n.description, variant=n.variant
            )
            for n in notifier.notifications
        ],
        clipboard_text=clipboard.text,
    )


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post(
    "/refine",
    response_model=WorkspaceResponse,
    responses={
        200: {"description": "Prompt refined"},
        401: {"description": "Authentication required"},
        422: {"description": "Form validation failed"},
        502: {"description": "Model invocation failed"},
        503: {"description": "Verification failed"},
    },
)
async def refine(
    body: RefineRequestBody,
    request: Request,
    response: Response,
    user: AuthUser = Depends(get_current_user),
    provider: GenerationProvider = Depends(get_generation_provider),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> WorkspaceResponse:
    """Refine a basic prompt idea into a detailed prompt."""
    bind_contextvars(user_id=user.user_id, action="refine_prompt")
    try:
        notifier = ResponseNotifier()
        clipboard = ResponseClipboard()
        workspace = Workspace(
            provider=provider,
            token_source=PresentedTokenSource(
                body.recaptcha_token, verifier, _client_ip(request)
            ),
            notifier=notifier,
            clipboard=clipboard,
        )

        snapshot = await workspace.submit(body.form_values())
        response.status_code = _status_for(workspace, snapshot)

        logger.info(
            "refine_request_completed",
            state=snapshot.state.value,
            status_code=response.status_code,
        )
        return _to_response(snapshot, notifier, clipboard)
    finally:
        unbind_contextvars("user_id", "action")


@router.post(
    "/suggest-parameters",
    response_model=WorkspaceResponse,
    responses={
        200: {"description": "Parameters suggested"},
        401: {"description": "Authentication required"},
        422: {"description": "Form validation failed"},
        502: {"description": "Model invocation failed"},
        503: {"description": "Verification failed"},
    },
)
async def suggest(
    body: SuggestRequestBody,
    request: Request,
    response: Response,
    user: AuthUser = Depends(get_current_user),
    provider: GenerationProvider = Depends(get_generation_provider),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> WorkspaceResponse:
    """Suggest style, length and tone for a basic prompt idea."""
    bind_contextvars(user_id=user.user_id, action="suggest_parameters")
    try:
        notifier = ResponseNotifier()
        clipboard = ResponseClipboard()
        workspace = Workspace(
            provider=provider,
            token_source=PresentedTokenSource(
                body.recaptcha_token, verifier, _client_ip(request)
            ),
            notifier=notifier,
            clipboard=clipboard,
        )

        snapshot = await workspace.suggest(body.form_values())
        response.status_code = _status_for(workspace, snapshot)

        logger.info(
            "suggest_request_completed",
            state=snapshot.suggestion_state.value,
            status_code=response.status_code,
        )
        return _to_response(snapshot, notifier, clipboard)
    finally:
        unbind_contextvars("user_id", "action")


@router.get("/options", response_model=ParameterOptionsResponse)
async def parameter_options() -> ParameterOptionsResponse:
    """List the style, length and tone choices and their defaults."""
    return ParameterOptionsResponse(
        styles=list(STYLE_OPTIONS),
        lengths=list(LENGTH_OPTIONS),
        tones=list(TONE_OPTIONS),
        default_style=DEFAULT_STYLE,
        default_length=DEFAULT_LENGTH,
        default_tone=DEFAULT_TONE,
    )
