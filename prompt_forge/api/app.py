"""FastAPI application factory and configuration.

Example:
    from prompt_forge.api import create_app

    app = create_app()

    # Run with uvicorn:
    # uvicorn prompt_forge.api.app:app --reload
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_forge.api.dependencies import AppState, get_app_state
from prompt_forge.api.routes import auth_router, health_router, prompts_router
from prompt_forge.core.config import Settings, load_settings
from prompt_forge.core.health import HealthChecker, ServiceCheck, ServiceStatus
from prompt_forge.core.logging import get_logger

logger = get_logger(__name__)

NOT_INITIALIZED_MESSAGE = "App state not initialized"


def _create_health_checker(app_state: AppState, settings: Settings) -> HealthChecker:
    """Create a health checker for the model provider and the verifier."""
    checker = HealthChecker(version=settings.app_version)

    async def check_anthropic() -> ServiceCheck:
        """Check Anthropic API configuration."""
        if not app_state.is_initialized:
            return ServiceCheck(
                name="anthropic",
                status=ServiceStatus.UNHEALTHY,
                message=NOT_INITIALIZED_MESSAGE,
            )
        try:
            _ = app_state.generation_provider
        except RuntimeError as ex:
            return ServiceCheck(
                name="anthropic", status=ServiceStatus.UNHEALTHY, message=str(ex)
            )
        if settings.anthropic_api_key:
            return ServiceCheck(
                name="anthropic",
                status=ServiceStatus.HEALTHY,
                message="API key configured",
                details={"model": settings.anthropic_model},
            )
        return ServiceCheck(
            name="anthropic",
            status=ServiceStatus.UNHEALTHY,
            message="ANTHROPIC_API_KEY not configured",
        )

    async def check_recaptcha() -> ServiceCheck:
        """Check reCAPTCHA secret configuration."""
        if not app_state.is_initialized:
            return ServiceCheck(
                name="recaptcha",
                status=ServiceStatus.UNHEALTHY,
                message=NOT_INITIALIZED_MESSAGE,
            )
        if app_state.token_verifier.is_configured:
            return ServiceCheck(
                name="recaptcha",
                status=ServiceStatus.HEALTHY,
                message="Secret key configured",
            )
        if settings.is_production:
            return ServiceCheck(
                name="recaptcha",
                status=ServiceStatus.UNHEALTHY,
                message="Secret key missing or placeholder",
            )
        return ServiceCheck(
            name="recaptcha",
            status=ServiceStatus.DEGRADED,
            message="Secret key not configured; verification skipped",
        )

    checker.add_check("anthropic", check_anthropic)
    checker.add_check("recaptcha", check_recaptcha)

    return checker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    logger.info("api_starting")

    settings: Settings = app.state.settings
    app_state = get_app_state()
    await app_state.initialize(settings)

    app.state.health_checker = _create_health_checker(app_state, settings)

    logger.info("api_started", version=settings.app_version)

    yield

    logger.info("api_shutting_down")
    await app_state.shutdown()
    logger.info("api_shutdown_complete")


def create_app(
    settings: Settings | None = None,
    title: str = "Prompt Forge API",
    description: str = "HTTP API for refining basic prompt ideas into detailed prompts",
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Runtime settings. Loaded from the environment if omitted.
        title: API title for OpenAPI docs.
        description: API description for OpenAPI docs.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title=title,
        description=description,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(prompts_router)

    logger.info(
        "app_configured",
        title=title,
        environment=settings.environment,
        cors_origins=settings.cors_origins,
    )

    return app


# Default app instance for uvicorn
app = create_app()
