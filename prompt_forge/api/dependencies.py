"""FastAPI dependency injection for providers, verifier and repository.

Example:
    from fastapi import Depends
    from prompt_forge.api.dependencies import get_generation_provider
    from prompt_forge.core.providers import GenerationProvider

    @router.post("/refine")
    async def refine(provider: GenerationProvider = Depends(get_generation_provider)):
        ...
"""

from typing import AsyncGenerator

import httpx

from prompt_forge.adapters import MemoryUserRepository
from prompt_forge.core.anti_abuse import VERIFY_TIMEOUT, RecaptchaVerifier, TokenVerifier
from prompt_forge.core.config import Settings
from prompt_forge.core.logging import get_logger
from prompt_forge.core.providers import GenerationProvider
from prompt_forge.ports import UserRepository

logger = get_logger(__name__)


class AppState:
    """Application state container for shared resources.

    Holds the singletons shared by every request handler. Nothing
    request-specific lives here.
    """

    def __init__(self) -> None:
        self._settings: Settings | None = None
        self._provider: GenerationProvider | None = None
        self._verifier: RecaptchaVerifier | None = None
        self._http_client: httpx.AsyncClient | None = None
        self._repository: MemoryUserRepository | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the app state has been initialized."""
        return self._initialized

    async def initialize(self, settings: Settings) -> None:
        """Create the provider, verifier and repository from settings."""
        if self._initialized:
            logger.warning("app_state_already_initialized")
            return

        # Import provider here to avoid circular imports
        from prompt_forge.providers.anthropic_provider import AnthropicProvider

        self._settings = settings

        self._repository = MemoryUserRepository()
        await self._repository.connect()
        logger.info("repository_initialized", backend="memory")

        self._provider = AnthropicProvider(
            api_key=settings.anthropic_api_key,
            default_model=settings.anthropic_model,
            timeout=settings.anthropic_timeout_seconds,
        )
        logger.info("generation_provider_initialized", model=settings.anthropic_model)

        self._http_client = httpx.AsyncClient(timeout=VERIFY_TIMEOUT)
        self._verifier = RecaptchaVerifier(
            settings.recaptcha_secret_key,
            score_threshold=settings.recaptcha_score_threshold,
            allow_unconfigured=not settings.is_production,
            client=self._http_client,
        )
        logger.info(
            "recaptcha_verifier_initialized",
            configured=self._verifier.is_configured,
            threshold=settings.recaptcha_score_threshold,
        )

        self._initialized = True
        logger.info("app_state_initialized", environment=settings.environment)

    async def shutdown(self) -> None:
        """Clean up resources on shutdown."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        if self._repository is not None:
            await self._repository.close()
            logger.info("repository_closed")
        self._initialized = False
        logger.info("app_state_shutdown")

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise RuntimeError("App state not initialized")
        return self._settings

    @property
    def generation_provider(self) -> GenerationProvider:
        """Get the generation provider."""
        if self._provider is None:
            raise RuntimeError("App state not initialized")
        return self._provider

    @property
    def token_verifier(self) -> RecaptchaVerifier:
        """Get the reCAPTCHA verifier."""
        if self._verifier is None:
            raise RuntimeError("App state not initialized")
        return self._verifier

    @property
    def user_repository(self) -> MemoryUserRepository:
        """Get the user repository."""
        if self._repository is None:
            raise RuntimeError("App state not initialized")
        return self._repository


# Global app state instance
_app_state = AppState()


def get_app_state() -> AppState:
    """Get the global app state instance."""
    return _app_state


async def get_generation_provider() -> AsyncGenerator[GenerationProvider, None]:
    """FastAPI dependency for the generation provider."""
    yield _app_state.generation_provider


async def get_token_verifier() -> AsyncGenerator[TokenVerifier, None]:
    """FastAPI dependency for the anti-abuse token verifier."""
    yield _app_state.token_verifier


async def get_user_repository() -> AsyncGenerator[UserRepository, None]:
    """FastAPI dependency for the user repository."""
    yield _app_state.user_repository
