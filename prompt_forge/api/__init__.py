"""HTTP API package.

Exposes the prompt workspace and account management to web clients.
"""

from prompt_forge.api.app import create_app
from prompt_forge.api.dependencies import (
    get_generation_provider,
    get_token_verifier,
    get_user_repository,
)

__all__ = [
    "create_app",
    "get_generation_provider",
    "get_token_verifier",
    "get_user_repository",
]
