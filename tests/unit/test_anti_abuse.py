"""Tests for reCAPTCHA verification and token sources."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from prompt_forge.core.anti_abuse import (
    REFINE_PROMPT_ACTION,
    RECAPTCHA_VERIFY_URL,
    PresentedTokenSource,
    RecaptchaVerifier,
)
from prompt_forge.core.errors import AntiAbuseTokenError
from tests.mocks.providers import MockTokenVerifier

SECRET = "test-secret-key"


def _client(payload: object, status_code: int = 200, captured: list | None = None):
    """Build an httpx client whose transport answers with a fixed payload."""

    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _verifier(client: httpx.AsyncClient, **kwargs) -> RecaptchaVerifier:
    return RecaptchaVerifier(SECRET, client=client, **kwargs)


class TestRecaptchaVerifier:
    """Tests for RecaptchaVerifier.verify()."""

    @pytest.mark.asyncio
    async def test_accepts_good_score(self) -> None:
        captured: list[httpx.Request] = []
        client = _client(
            {"success": True, "score": 0.9, "action": REFINE_PROMPT_ACTION},
            captured=captured,
        )
        async with client:
            await _verifier(client).verify("tok", REFINE_PROMPT_ACTION, "203.0.113.7")

        assert len(captured) == 1
        request = captured[0]
        assert str(request.url) == RECAPTCHA_VERIFY_URL
        form = parse_qs(request.content.decode())
        assert form == {
            "secret": [SECRET],
            "response": ["tok"],
            "remoteip": ["203.0.113.7"],
        }

    @pytest.mark.asyncio
    async def test_score_at_threshold_passes(self) -> None:
        client = _client({"success": True, "score": 0.5})
        async with client:
            await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)

    @pytest.mark.asyncio
    async def test_rejects_low_score(self) -> None:
        client = _client({"success": True, "score": 0.1, "action": REFINE_PROMPT_ACTION})
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
            assert "below threshold" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_custom_threshold(self) -> None:
        client = _client({"success": True, "score": 0.6})
        async with client:
            with pytest.raises(AntiAbuseTokenError):
                await _verifier(client, score_threshold=0.7).verify(
                    "tok", REFINE_PROMPT_ACTION
                )

    @pytest.mark.asyncio
    async def test_rejects_unsuccessful(self) -> None:
        client = _client({"success": False, "error-codes": ["timeout-or-duplicate"]})
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
        assert "timeout-or-duplicate" in exc_info.value.reason
        assert exc_info.value.message == AntiAbuseTokenError.USER_MESSAGE

    @pytest.mark.asyncio
    async def test_rejects_missing_score(self) -> None:
        client = _client({"success": True})
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
            assert "score missing" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_rejects_action_mismatch(self) -> None:
        client = _client({"success": True, "score": 0.9, "action": "login"})
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
        assert "login" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_rejects_non_json(self) -> None:
        client = _client("<html>oops</html>")
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
            assert "not JSON" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_rejects_http_error_status(self) -> None:
        client = _client({"success": True, "score": 0.9}, status_code=500)
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
            assert "HTTP 500" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_rejects_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
            assert "request failed" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_rejects_empty_token(self) -> None:
        client = _client({"success": True, "score": 0.9})
        async with client:
            with pytest.raises(AntiAbuseTokenError) as exc_info:
                await _verifier(client).verify("", REFINE_PROMPT_ACTION)
            assert "empty token" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_missing_secret_rejected_by_default(self) -> None:
        verifier = RecaptchaVerifier(None)
        assert verifier.is_configured is False
        with pytest.raises(AntiAbuseTokenError) as exc_info:
            await verifier.verify("tok", REFINE_PROMPT_ACTION)
        assert "not configured" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_missing_secret_allowed_in_development(self) -> None:
        verifier = RecaptchaVerifier(None, allow_unconfigured=True)
        await verifier.verify("tok", REFINE_PROMPT_ACTION)

    @pytest.mark.asyncio
    async def test_placeholder_secret_rejected(self) -> None:
        verifier = RecaptchaVerifier("YOUR_SECRET_KEY", allow_unconfigured=True)
        assert verifier.is_configured is False
        with pytest.raises(AntiAbuseTokenError) as exc_info:
            await verifier.verify("tok", REFINE_PROMPT_ACTION)
        assert "placeholder" in exc_info.value.reason

    def test_is_configured(self) -> None:
        assert RecaptchaVerifier(SECRET).is_configured is True


class TestPresentedTokenSource:
    """Tests for PresentedTokenSource."""

    @pytest.mark.asyncio
    async def test_returns_verified_token(self) -> None:
        verifier = MockTokenVerifier()
        source = PresentedTokenSource(" tok ", verifier, remote_ip="198.51.100.1")

        token = await source.acquire_token(REFINE_PROMPT_ACTION)

        assert token == "tok"
        assert verifier.calls == [("tok", REFINE_PROMPT_ACTION, "198.51.100.1")]

    @pytest.mark.asyncio
    async def test_missing_token(self) -> None:
        verifier = MockTokenVerifier()
        source = PresentedTokenSource(None, verifier)

        with pytest.raises(AntiAbuseTokenError) as exc_info:
            await source.acquire_token(REFINE_PROMPT_ACTION)
        assert "no token presented" in exc_info.value.reason
        assert verifier.calls == []

    @pytest.mark.asyncio
    async def test_rejected_token(self) -> None:
        source = PresentedTokenSource("tok", MockTokenVerifier(reject=True))
        with pytest.raises(AntiAbuseTokenError):
            await source.acquire_token(REFINE_PROMPT_ACTION)

    @pytest.mark.asyncio
    async def test_single_use(self) -> None:
        source = PresentedTokenSource("tok", MockTokenVerifier())
        await source.acquire_token(REFINE_PROMPT_ACTION)
        with pytest.raises(AntiAbuseTokenError) as exc_info:
            await source.acquire_token(REFINE_PROMPT_ACTION)
        assert "already used" in exc_info.value.reason


class TestPayloadShape:
    """The verifier tolerates extra fields Google may add."""

    @pytest.mark.asyncio
    async def test_extra_fields_ignored(self) -> None:
        body = json.loads(
            '{"success": true, "score": 0.8, "action": "refine_prompt",'
            ' "challenge_ts": "2024-01-01T00:00:00Z", "hostname": "example.com"}'
        )
        client = _client(body)
        async with client:
            await _verifier(client).verify("tok", REFINE_PROMPT_ACTION)
