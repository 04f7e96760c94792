"""Generation provider implementations.

This module contains concrete implementations of the GenerationProvider
protocol defined in prompt_forge/core/providers.py.
"""

from prompt_forge.providers.anthropic_provider import AnthropicProvider

__all__ = ["AnthropicProvider"]
