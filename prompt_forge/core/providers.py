"""Provider protocol for structured text generation.

The workspace talks to the generative model through this protocol only.
Concrete providers live in prompt_forge/providers/ and are constructed once
at application startup, then passed explicitly to the functions that need
them.

Example:
    class MyProvider:
        async def generate_structured(
            self,
            instruction: str,
            *,
            output_schema: dict[str, Any],
            schema_name: str,
            schema_description: str = "",
            max_tokens: int = 1024,
        ) -> dict[str, Any]:
            ...
"""

from typing import Any, Protocol


class GenerationProvider(Protocol):
    """Protocol for a model that answers with a JSON object.

    Implementations send the instruction to the model, constrain the answer
    to output_schema, and return the decoded object. They must not retry and
    must not validate the object against the schema; callers do that.
    """

    async def generate_structured(
        self,
        instruction: str,
        *,
        output_schema: dict[str, Any],
        schema_name: str,
        schema_description: str = "",
        max_tokens: int = 1024,
    ) -> dict[str, Any]:
        """Generate a structured answer for an instruction.

        Args:
            instruction: The complete natural-language instruction.
            output_schema: JSON schema the answer must follow.
            schema_name: Identifier for the schema (letters, digits, "_").
            schema_description: Human-readable description of the answer.
            max_tokens: Maximum tokens to generate.

        Returns:
            The decoded answer object. May be empty if the model did not
            produce one.
        """
        ...
