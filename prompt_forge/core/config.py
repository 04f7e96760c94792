"""Application settings loaded from environment variables.

Example:
    from prompt_forge.core.config import load_settings

    settings = load_settings()
    if settings.is_production:
        ...
"""

from dataclasses import dataclass, field
from os import getenv

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


def _parse_origins(raw: str) -> list[str]:
    if raw.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the API service.

    Attributes:
        environment: "development" or "production".
        app_version: Version string reported by health checks and OpenAPI.
        anthropic_api_key: Key for the generative model; None disables it.
        anthropic_model: Model identifier used for refinement calls.
        anthropic_timeout_seconds: Transport timeout for a model call.
        recaptcha_secret_key: Server-side reCAPTCHA secret; None skips
            verification in development only.
        recaptcha_score_threshold: Minimum v3 score accepted as human.
        cors_origins: Allowed CORS origins.
    """

    environment: str = "development"
    app_version: str = "1.0.0"
    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_MODEL
    anthropic_timeout_seconds: float = 60.0
    recaptcha_secret_key: str | None = None
    recaptcha_score_threshold: float = 0.5
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings() -> Settings:
    """Build Settings from the process environment.

    Empty variables are treated as unset.

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    return Settings(
        environment=getenv("ENVIRONMENT", "development").lower(),
        app_version=getenv("APP_VERSION", "1.0.0"),
        anthropic_api_key=getenv("ANTHROPIC_API_KEY") or None,
        anthropic_model=getenv("ANTHROPIC_MODEL") or DEFAULT_MODEL,
        anthropic_timeout_seconds=float(getenv("ANTHROPIC_TIMEOUT_SECONDS", "60")),
        recaptcha_secret_key=getenv("RECAPTCHA_SECRET_KEY") or None,
        recaptcha_score_threshold=float(getenv("RECAPTCHA_SCORE_THRESHOLD", "0.5")),
        cors_origins=_parse_origins(getenv("CORS_ORIGINS", "*")),
    )
