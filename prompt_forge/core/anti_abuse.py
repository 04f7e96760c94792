"""One-time anti-abuse tokens (reCAPTCHA v3) for costly actions.

The browser obtains a token scoped to an action name ("refine_prompt",
"suggest_parameters") and posts it with the form. A TokenSource hands that
token to the workspace; the RecaptchaVerifier checks it against Google's
siteverify endpoint before the model is called.

Example:
    verifier = RecaptchaVerifier(secret_key=settings.recaptcha_secret_key)
    source = PresentedTokenSource(token=body.recaptcha_token, verifier=verifier)
    token = await source.acquire_token("refine_prompt")
"""

from typing import Any, Protocol

import httpx

from prompt_forge.core.errors import AntiAbuseTokenError
from prompt_forge.core.logging import get_logger

logger = get_logger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
DEFAULT_SCORE_THRESHOLD = 0.5
VERIFY_TIMEOUT = 10.0

REFINE_PROMPT_ACTION = "refine_prompt"
SUGGEST_PARAMETERS_ACTION = "suggest_parameters"

# Secrets copied verbatim from setup guides
PLACEHOLDER_SECRETS = frozenset(
    {
        "your_actual_recaptcha_secret_key_here",
        "YOUR_SECRET_KEY",
        "your_actual_secret_key_from_google",
    }
)

# Google error codes that point at a server-side misconfiguration
_SECRET_ERROR_CODES = frozenset({"missing-input-secret", "invalid-input-secret"})


class TokenSource(Protocol):
    """Protocol for obtaining a verified one-time token for an action."""

    async def acquire_token(self, action: str) -> str:
        """Return a token for the action.

        Raises:
            AntiAbuseTokenError: If no usable token can be produced.
        """
        ...


class TokenVerifier(Protocol):
    """Protocol for server-side token verification."""

    async def verify(self, token: str, action: str, remote_ip: str | None = None) -> None:
        """Verify a token for an action.

        Raises:
            AntiAbuseTokenError: If the token is rejected.
        """
        ...


class RecaptchaVerifier:
    """Verify reCAPTCHA v3 tokens against Google's siteverify endpoint.

    Attributes:
        _secret_key: Server-side secret, or None when not configured.
        _score_threshold: Minimum score accepted as human.
        _allow_unconfigured: Accept every token when no secret is set.
            Only meant for local development.
    """

    def __init__(
        self,
        secret_key: str | None,
        *,
        score_threshold: float = DEFAULT_SCORE_THRESHOLD,
        allow_unconfigured: bool = False,
        client: httpx.AsyncClient | None = None,
        verify_url: str = RECAPTCHA_VERIFY_URL,
    ) -> None:
        """Initialize the verifier.

        Args:
            secret_key: The reCAPTCHA secret key.
            score_threshold: Scores below this are rejected. Defaults to 0.5.
            allow_unconfigured: Skip verification if secret_key is None.
            client: Optional shared httpx client. A short-lived client is
                created per call when omitted.
            verify_url: Verification endpoint.
        """
        self._secret_key = secret_key
        self._score_threshold = score_threshold
        self._allow_unconfigured = allow_unconfigured
        self._client = client
        self._verify_url = verify_url

    @property
    def is_configured(self) -> bool:
        """Whether a usable secret key is set."""
        return bool(self._secret_key) and self._secret_key not in PLACEHOLDER_SECRETS

    async def verify(self, token: str, action: str, remote_ip: str | None = None) -> None:
        """Verify a token for an action.

        Args:
            token: The token produced in the browser.
            action: The action name the token must be scoped to.
            remote_ip: Optional client IP forwarded to Google.

        Raises:
            AntiAbuseTokenError: If the token is rejected or verification
                cannot be performed.
        """
        if not self._secret_key:
            if self._allow_unconfigured:
                logger.warning(
                    "recaptcha_verification_skipped",
                    action=action,
                    reason="RECAPTCHA_SECRET_KEY not set (development mode)",
                )
                return
            logger.error("recaptcha_secret_missing", action=action)
            raise AntiAbuseTokenError(action, "secret key not configured")

        if self._secret_key in PLACEHOLDER_SECRETS:
            logger.error("recaptcha_secret_placeholder", action=action)
            raise AntiAbuseTokenError(action, "secret key is a placeholder value")

        if not token:
            raise AntiAbuseTokenError(action, "empty token")

        form = {"secret": self._secret_key, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        result = await self._post(form, action)
        self._check_result(result, action)

    async def _post(self, form: dict[str, str], action: str) -> dict[str, Any]:
        try:
            if self._client is not None:
                response = await self._client.post(self._verify_url, data=form)
            else:
                async with httpx.AsyncClient(timeout=VERIFY_TIMEOUT) as client:
                    response = await client.post(self._verify_url, data=form)
        except httpx.HTTPError as ex:
            logger.error("recaptcha_request_failed", action=action, error=str(ex))
            raise AntiAbuseTokenError(action, f"verification request failed: {ex}") from ex

        try:
            result = response.json()
        except ValueError as ex:
            logger.error(
                "recaptcha_response_not_json",
                action=action,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise AntiAbuseTokenError(action, "verification response was not JSON") from ex

        if response.status_code >= 400:
            logger.error(
                "recaptcha_http_error",
                action=action,
                status_code=response.status_code,
            )
            raise AntiAbuseTokenError(
                action, f"verification endpoint returned HTTP {response.status_code}"
            )
        if not isinstance(result, dict):
            raise AntiAbuseTokenError(action, "verification response was not an object")
        return result

    def _check_result(self, result: dict[str, Any], action: str) -> None:
        error_codes = result.get("error-codes") or []

        if not result.get("success"):
            log = logger.error if _SECRET_ERROR_CODES & set(error_codes) else logger.warning
            log(
                "recaptcha_rejected",
                action=action,
                error_codes=error_codes,
                hostname=result.get("hostname"),
            )
            raise AntiAbuseTokenError(
                action, f"verification unsuccessful: {', '.join(error_codes) or 'no error codes'}"
            )

        score = result.get("score")
        if score is None:
            logger.warning("recaptcha_score_missing", action=action)
            raise AntiAbuseTokenError(action, "score missing from verification response")

        reported_action = result.get("action")
        if reported_action and reported_action != action:
            logger.warning(
                "recaptcha_action_mismatch",
                expected=action,
                reported=reported_action,
            )
            raise AntiAbuseTokenError(
                action, f"token was issued for action '{reported_action}'"
            )

        if score < self._score_threshold:
            logger.warning(
                "recaptcha_score_too_low",
                action=action,
                score=score,
                threshold=self._score_threshold,
            )
            raise AntiAbuseTokenError(action, f"score {score} below threshold")

        logger.info("recaptcha_verified", action=action, score=score)


class PresentedTokenSource:
    """TokenSource backed by a token the client posted with its request.

    The token is single-use: a second acquire_token call fails.
    """

    def __init__(
        self,
        token: str | None,
        verifier: TokenVerifier,
        remote_ip: str | None = None,
    ) -> None:
        self._token = token
        self._verifier = verifier
        self._remote_ip = remote_ip
        self._used = False

    async def acquire_token(self, action: str) -> str:
        if self._used:
            raise AntiAbuseTokenError(action, "token already used")
        self._used = True

        token = (self._token or "").strip()
        if not token:
            raise AntiAbuseTokenError(action, "no token presented")

        await self._verifier.verify(token, action, self._remote_ip)
        return token
