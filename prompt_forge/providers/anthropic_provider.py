"""Anthropic Claude implementation of the GenerationProvider protocol.

Structured output is obtained by declaring a single tool whose input schema
is the requested output schema and forcing the model to call it. The tool
call's input is the answer object.
"""

from __future__ import annotations

from typing import Any

from anthropic import AsyncAnthropic

from prompt_forge.core.config import DEFAULT_MODEL
from prompt_forge.core.logging import get_logger
from prompt_forge.core.providers import GenerationProvider

logger = get_logger(__name__)


class AnthropicProvider:
    """Anthropic Claude API provider implementing GenerationProvider.

    The API key is injected via the constructor; the client is created once
    and reused for every call. SDK-level retries are disabled so a failed
    call surfaces immediately.

    Attributes:
        _client: The AsyncAnthropic client instance.
        _default_model: The model used for every call.
    """

    def __init__(
        self,
        api_key: str | None,
        default_model: str = DEFAULT_MODEL,
        timeout: float | None = None,
    ) -> None:
        """Initialize the Anthropic provider.

        Args:
            api_key: The Anthropic API key. None falls back to the SDK's
                own ANTHROPIC_API_KEY lookup.
            default_model: The model to use for completions.
            timeout: Optional request timeout in seconds. The SDK default
                applies when omitted.
        """
        kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._client = AsyncAnthropic(**kwargs)
        self._default_model = default_model

    @property
    def model(self) -> str:
        return self._default_model

    async def generate_structured(
        self,
        instruction: str,
        *,
        output_schema: dict[str, Any],
        schema_name: str,
        schema_description: str = "",
        max_tokens: int = 1024,
    ) -> dict[str, Any]:
        """Send the instruction and return the forced tool call's input.

        Args:
            instruction: The complete instruction text (sent as the user turn).
            output_schema: JSON schema for the answer object.
            schema_name: Tool name; the model is forced to call it.
            schema_description: Tool description.
            max_tokens: Maximum tokens to generate.

        Returns:
            The tool input object, or an empty dict if the model produced no
            tool call.

        Raises:
            anthropic.APIError: If the API call fails.
        """
        response = await self._client.messages.create(
            model=self._default_model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": instruction}],
            tools=[
                {
                    "name": schema_name,
                    "description": schema_description or schema_name,
                    "input_schema": output_schema,
                }
            ],
            tool_choice={"type": "tool", "name": schema_name},
        )

        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == schema_name:
                payload = block.input
                if isinstance(payload, dict):
                    return payload
                logger.warning(
                    "anthropic_tool_input_not_object",
                    schema=schema_name,
                    input_type=type(payload).__name__,
                )
                return {}

        logger.warning(
            "anthropic_no_tool_call",
            schema=schema_name,
            stop_reason=getattr(response, "stop_reason", None),
        )
        return {}


# Protocol compliance verification
def _verify_protocol_compliance() -> None:
    """Static check that AnthropicProvider satisfies GenerationProvider.

    Not called at runtime.
    """
    _: GenerationProvider = AnthropicProvider(api_key="test")  # noqa: F841
