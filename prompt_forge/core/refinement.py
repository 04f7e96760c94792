"""Invoke the generative model for refinements and parameter suggestions.

Each call builds the instruction, declares the output schema, sends one
request through the injected provider and validates the answer. Failures of
any kind surface as ModelInvocationError; there are no retries and no
partial results. Repeated calls with identical input may return different
text since the model is not deterministic.

Example:
    from prompt_forge.core.refinement import refine_prompt

    result = await refine_prompt(provider, request)
    print(result.refined_prompt)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from prompt_forge.core.errors import ErrorCategory, ModelInvocationError
from prompt_forge.core.instructions import (
    build_instruction_for,
    build_suggestion_instruction,
)
from prompt_forge.core.logging import get_logger
from prompt_forge.core.parameters import RefinementRequest, SuggestionRequest
from prompt_forge.core.prompts.refinement import (
    REFINEMENT_SCHEMA_DESCRIPTION,
    REFINEMENT_SCHEMA_NAME,
)
from prompt_forge.core.prompts.suggestion import (
    SUGGESTION_SCHEMA_DESCRIPTION,
    SUGGESTION_SCHEMA_NAME,
)
from prompt_forge.core.providers import GenerationProvider

logger = get_logger(__name__)

REFINE_FAILURE_PREFIX = "Failed to refine prompt"
SUGGEST_FAILURE_PREFIX = "Failed to suggest parameters"


class RefinementResult(BaseModel):
    """Model answer for a refinement. Wire field: refinedPrompt."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    refined_prompt: str = Field(
        ...,
        alias="refinedPrompt",
        min_length=1,
        description="The refined prompt, designed to be used with another generative AI model.",
    )


class ParameterSuggestion(BaseModel):
    """Model answer for a parameter suggestion."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    suggested_style: str = Field(
        ..., alias="suggestedStyle", description="Suggested style for the prompt."
    )
    suggested_length: str = Field(
        ...,
        alias="suggestedLength",
        description="Suggested length for the prompt (e.g., short, medium, long).",
    )
    suggested_tone: str = Field(
        ...,
        alias="suggestedTone",
        description="Suggested tone for the prompt (e.g., formal, informal, humorous).",
    )
    reasoning: str = Field(
        ..., description="The reasoning behind the parameter suggestions."
    )


def output_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema of a result model using its wire (alias) field names."""
    return model.model_json_schema(by_alias=True)


async def _invoke(
    provider: GenerationProvider,
    instruction: str,
    model: type[BaseModel],
    schema_name: str,
    schema_description: str,
    failure_prefix: str,
) -> Any:
    try:
        payload = await provider.generate_structured(
            instruction,
            output_schema=output_schema(model),
            schema_name=schema_name,
            schema_description=schema_description,
        )
    except Exception as ex:
        error = ModelInvocationError.from_exception(ex, failure_prefix)
        logger.error(
            "model_invocation_failed",
            schema=schema_name,
            category=error.category.name,
            error=str(ex),
        )
        raise error from ex

    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as ex:
        missing = sorted(
            str(err["loc"][0]) for err in ex.errors() if err.get("loc")
        )
        if isinstance(payload, dict):
            received: Any = sorted(payload)
        else:
            received = type(payload).__name__
        logger.error(
            "model_response_contract_violation",
            schema=schema_name,
            fields=missing,
            received=received,
        )
        raise ModelInvocationError(
            f"{failure_prefix}: response missing or empty field(s) {', '.join(missing)}",
            category=ErrorCategory.CONTRACT_VIOLATION,
            original_error=ex,
        ) from ex


async def refine_prompt(
    provider: GenerationProvider, request: RefinementRequest
) -> RefinementResult:
    """Refine a prompt idea into a full prompt.

    Args:
        provider: The generation provider to call.
        request: The validated refinement request.

    Returns:
        The refined prompt.

    Raises:
        ModelInvocationError: If the call fails or the answer lacks a
            non-empty refinedPrompt.
    """
    instruction = build_instruction_for(request)
    result: RefinementResult = await _invoke(
        provider,
        instruction,
        RefinementResult,
        REFINEMENT_SCHEMA_NAME,
        REFINEMENT_SCHEMA_DESCRIPTION,
        REFINE_FAILURE_PREFIX,
    )
    logger.info(
        "prompt_refined",
        idea_length=len(request.idea_text),
        refined_length=len(result.refined_prompt),
    )
    return result


async def suggest_parameters(
    provider: GenerationProvider, request: SuggestionRequest
) -> ParameterSuggestion:
    """Ask the model for style/length/tone suggestions.

    Raises:
        ModelInvocationError: If the call fails or a field is missing.
    """
    suggestion: ParameterSuggestion = await _invoke(
        provider,
        build_suggestion_instruction(request.basic_prompt),
        ParameterSuggestion,
        SUGGESTION_SCHEMA_NAME,
        SUGGESTION_SCHEMA_DESCRIPTION,
        SUGGEST_FAILURE_PREFIX,
    )
    logger.info("parameters_suggested", style=suggestion.suggested_style)
    return suggestion
