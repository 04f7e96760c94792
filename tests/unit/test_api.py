"""Tests for the HTTP API application and shared state."""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from prompt_forge.api.app import _create_health_checker, create_app
from prompt_forge.api.dependencies import AppState
from prompt_forge.core.config import Settings
from prompt_forge.core.health import HealthChecker, ServiceCheck, ServiceStatus


def _app_with_checker(checker: HealthChecker) -> FastAPI:
    """Create the app with a lifespan that only installs a health checker."""
    app = create_app(settings=Settings())

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.health_checker = checker
        yield

    app.router.lifespan_context = test_lifespan
    return app


class TestAppState:
    """Tests for AppState."""

    def test_initial_state(self) -> None:
        assert AppState().is_initialized is False

    @pytest.mark.parametrize(
        "attribute",
        ["settings", "generation_provider", "token_verifier", "user_repository"],
    )
    def test_raises_before_init(self, attribute: str) -> None:
        with pytest.raises(RuntimeError, match="App state not initialized"):
            getattr(AppState(), attribute)

    @pytest.mark.asyncio
    async def test_initialize_and_shutdown(self) -> None:
        state = AppState()
        await state.initialize(Settings(anthropic_api_key="sk-test"))

        assert state.is_initialized is True
        assert state.user_repository.is_connected is True
        assert state.token_verifier.is_configured is False
        assert state.settings.anthropic_api_key == "sk-test"

        await state.shutdown()
        assert state.is_initialized is False
        assert state.user_repository.is_connected is False

    @pytest.mark.asyncio
    async def test_initialize_twice_is_noop(self) -> None:
        state = AppState()
        await state.initialize(Settings(anthropic_api_key="sk-test"))
        provider = state.generation_provider

        await state.initialize(Settings(anthropic_api_key="sk-other"))

        assert state.generation_provider is provider
        await state.shutdown()


class TestCreateApp:
    """Tests for the create_app factory."""

    def test_defaults(self) -> None:
        app = create_app(settings=Settings(app_version="9.9.9"))
        assert app.title == "Prompt Forge API"
        assert app.version == "9.9.9"

    def test_custom_title(self) -> None:
        app = create_app(settings=Settings(), title="Custom API")
        assert app.title == "Custom API"

    def test_cors_middleware_added(self) -> None:
        app = create_app(settings=Settings(cors_origins=["http://localhost:3000"]))
        assert len(app.user_middleware) > 0

    def test_registers_routes(self) -> None:
        routes = {getattr(route, "path", None) for route in create_app(settings=Settings()).routes}
        for path in (
            "/health",
            "/ready",
            "/live",
            "/auth/signup",
            "/auth/login",
            "/auth/me",
            "/auth/profile",
            "/auth/password",
            "/prompts/refine",
            "/prompts/suggest-parameters",
            "/prompts/options",
        ):
            assert path in routes


class TestHealthRoutes:
    """Tests for health check routes."""

    def test_liveness(self) -> None:
        with TestClient(_app_with_checker(HealthChecker(version="test"))) as client:
            response = client.get("/live")
        assert response.status_code == 200
        assert response.json() == {"alive": True}

    def test_health_with_no_checks(self) -> None:
        with TestClient(_app_with_checker(HealthChecker(version="test"))) as client:
            response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "test"
        assert data["checks"] == []

    def test_health_503_when_unhealthy(self) -> None:
        async def unhealthy() -> ServiceCheck:
            return ServiceCheck(
                name="anthropic",
                status=ServiceStatus.UNHEALTHY,
                message="ANTHROPIC_API_KEY not configured",
            )

        checker = HealthChecker(version="test")
        checker.add_check("anthropic", unhealthy)

        with TestClient(_app_with_checker(checker)) as client:
            response = client.get("/health")
            ready = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"][0]["name"] == "anthropic"
        assert ready.status_code == 503
        assert ready.json() == {"ready": False, "status": "unhealthy"}

    def test_degraded_is_ready_but_not_healthy(self) -> None:
        async def degraded() -> ServiceCheck:
            return ServiceCheck(name="recaptcha", status=ServiceStatus.DEGRADED)

        checker = HealthChecker(version="test")
        checker.add_check("recaptcha", degraded)

        with TestClient(_app_with_checker(checker)) as client:
            health = client.get("/health")
            ready = client.get("/ready")

        assert health.status_code == 503
        assert ready.status_code == 200
        assert ready.json() == {"ready": True, "status": "degraded"}


class TestServiceChecks:
    """Tests for the anthropic and recaptcha checks."""

    @pytest.mark.asyncio
    async def test_uninitialized_state_is_unhealthy(self) -> None:
        checker = _create_health_checker(AppState(), Settings())
        report = await checker.check_all()
        assert report.status == ServiceStatus.UNHEALTHY
        assert {c.message for c in report.checks} == {"App state not initialized"}

    @pytest.mark.asyncio
    async def test_development_without_recaptcha_is_degraded(self) -> None:
        settings = Settings(anthropic_api_key="sk-test")
        state = AppState()
        await state.initialize(settings)
        try:
            report = await _create_health_checker(state, settings).check_all()
        finally:
            await state.shutdown()

        statuses = {c.name: c.status for c in report.checks}
        assert statuses == {
            "anthropic": ServiceStatus.HEALTHY,
            "recaptcha": ServiceStatus.DEGRADED,
        }
        assert report.status == ServiceStatus.DEGRADED

    @pytest.mark.asyncio
    async def test_production_without_secrets_is_unhealthy(self) -> None:
        settings = Settings(environment="production")
        state = AppState()
        await state.initialize(settings)
        try:
            report = await _create_health_checker(state, settings).check_all()
        finally:
            await state.shutdown()

        statuses = {c.name: c.status for c in report.checks}
        assert statuses == {
            "anthropic": ServiceStatus.UNHEALTHY,
            "recaptcha": ServiceStatus.UNHEALTHY,
        }

    @pytest.mark.asyncio
    async def test_fully_configured_is_healthy(self) -> None:
        settings = Settings(anthropic_api_key="sk-test", recaptcha_secret_key="real-secret")
        state = AppState()
        await state.initialize(settings)
        try:
            report = await _create_health_checker(state, settings).check_all()
        finally:
            await state.shutdown()

        assert report.status == ServiceStatus.HEALTHY
