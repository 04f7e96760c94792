"""Form schema and validation for refinement and suggestion requests.

Raw form values (as posted by the browser) are validated into immutable
request models. Validation failures are reported per field so the form can
highlight them; no external call is made for invalid input.

Example:
    from prompt_forge.core.parameters import validate_refinement_form

    request = validate_refinement_form(
        {"idea_text": "Write a story about a robot", "tone": "Friendly"}
    )
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from prompt_forge.core.errors import ValidationError

MIN_IDEA_LENGTH = 10

IDEA_REQUIRED_MESSAGE = "Prompt idea is required."
IDEA_TOO_SHORT_MESSAGE = (
    f"Prompt idea must be at least {MIN_IDEA_LENGTH} characters."
)

STYLE_OPTIONS = (
    "Descriptive",
    "Narrative",
    "Persuasive",
    "Technical",
    "Creative",
    "Formal",
    "Informal",
    "Humorous",
)
LENGTH_OPTIONS = (
    "Short (1-2 sentences)",
    "Medium (1 paragraph)",
    "Long (multiple paragraphs)",
    "Very Long (essay/article length)",
)
TONE_OPTIONS = (
    "Neutral",
    "Friendly",
    "Professional",
    "Humorous",
    "Assertive",
    "Empathetic",
    "Serious",
    "Sarcastic",
)

# Values preselected in the form
DEFAULT_STYLE = STYLE_OPTIONS[0]
DEFAULT_LENGTH = LENGTH_OPTIONS[1]
DEFAULT_TONE = TONE_OPTIONS[0]


def _check_idea(value: Any) -> str:
    if value is None:
        raise ValueError(IDEA_REQUIRED_MESSAGE)
    text = str(value).strip()
    if not text:
        raise ValueError(IDEA_REQUIRED_MESSAGE)
    if len(text) < MIN_IDEA_LENGTH:
        raise ValueError(IDEA_TOO_SHORT_MESSAGE)
    return text


class RefinementRequest(BaseModel):
    """A validated request to refine a prompt idea.

    Attributes:
        idea_text: The user's basic prompt idea (stripped, >= 10 chars).
        style: Desired style of the content the refined prompt will produce.
        length: Desired length of that content.
        tone: Desired tone of that content.
        include_parameters: The form's parameter toggle. When False the
            style/length/tone values are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    idea_text: str
    style: str | None = None
    length: str | None = None
    tone: str | None = None
    include_parameters: bool = True

    @field_validator("idea_text", mode="before")
    @classmethod
    def _validate_idea(cls, value: Any) -> str:
        return _check_idea(value)

    @field_validator("style", "length", "tone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class SuggestionRequest(BaseModel):
    """A validated request for parameter suggestions."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    basic_prompt: str

    @field_validator("basic_prompt", mode="before")
    @classmethod
    def _validate_prompt(cls, value: Any) -> str:
        return _check_idea(value)


def _field_errors(ex: PydanticValidationError) -> dict[str, str]:
    """Flatten pydantic errors into one message per top-level field."""
    errors: dict[str, str] = {}
    for error in ex.errors():
        loc = error.get("loc") or ("__root__",)
        field_name = str(loc[0])
        if field_name in errors:
            continue
        message = error.get("msg", "Invalid value.")
        # Messages raised from our validators arrive as "Value error, <msg>"
        errors[field_name] = message.removeprefix("Value error, ")
    return errors


def validate_refinement_form(raw: Mapping[str, Any]) -> RefinementRequest:
    """Validate raw form values into a RefinementRequest.

    Args:
        raw: Form values keyed by field name.

    Returns:
        The validated request.

    Raises:
        ValidationError: With per-field messages if any value is invalid.
    """
    data = dict(raw)
    data.setdefault("idea_text", None)
    try:
        return RefinementRequest.model_validate(data)
    except PydanticValidationError as ex:
        raise ValidationError(_field_errors(ex)) from ex


def validate_suggestion_form(raw: Mapping[str, Any]) -> SuggestionRequest:
    """Validate raw form values into a SuggestionRequest.

    Raises:
        ValidationError: With per-field messages if the prompt is invalid.
    """
    data = dict(raw)
    data.setdefault("basic_prompt", None)
    try:
        return SuggestionRequest.model_validate(data)
    except PydanticValidationError as ex:
        raise ValidationError(_field_errors(ex)) from ex
