"""Ports (protocols) for external systems."""

from prompt_forge.ports.repositories import (
    DuplicateEmailError,
    UserAccount,
    UserRepository,
)

__all__ = ["DuplicateEmailError", "UserAccount", "UserRepository"]
