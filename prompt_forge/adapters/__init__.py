"""Adapters implementing the repository protocols."""

from prompt_forge.adapters.memory_repository import MemoryUserRepository

__all__ = ["MemoryUserRepository"]
