"""API routes package."""

from prompt_forge.api.routes.auth import router as auth_router
from prompt_forge.api.routes.health import router as health_router
from prompt_forge.api.routes.prompts import router as prompts_router

__all__ = [
    "auth_router",
    "health_router",
    "prompts_router",
]
