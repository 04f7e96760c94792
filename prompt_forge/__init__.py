"""Prompt Forge: refine rough prompt ideas into production-ready prompts."""
