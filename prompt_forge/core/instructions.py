"""Build the instruction text sent to the generative model.

The builder works on an explicit instruction mode rather than on presence
checks of individual fields:

    InstructionMode = WithParameters(style, length, tone) | WithoutParameters

resolve_mode() is the single place that decides which mode a request maps
to, so "parameters absent" and "parameters present but blank" cannot drift
apart between call sites.

Example:
    from prompt_forge.core.instructions import (
        build_refinement_instruction,
        resolve_mode,
    )

    instruction = build_refinement_instruction(
        request.idea_text, resolve_mode(request)
    )
"""

from dataclasses import dataclass
from typing import assert_never

from prompt_forge.core.parameters import RefinementRequest
from prompt_forge.core.prompts.refinement import (
    REFINEMENT_OUTPUT_CONTRACT,
    REFINEMENT_PREAMBLE,
    UNSPECIFIED_PARAMETER,
    WITH_PARAMETERS_SECTION,
    WITHOUT_PARAMETERS_SECTION,
)
from prompt_forge.core.prompts.suggestion import PARAMETER_SUGGESTION_PROMPT


@dataclass(frozen=True)
class WithParameters:
    """Directives for the final content. Blank values are None."""

    style: str | None = None
    length: str | None = None
    tone: str | None = None


@dataclass(frozen=True)
class WithoutParameters:
    """No style/length/tone directives; the model picks sensible defaults."""


InstructionMode = WithParameters | WithoutParameters


def resolve_mode(request: RefinementRequest) -> InstructionMode:
    """Map a validated request onto an instruction mode.

    The parameter toggle being off, or all three parameters being blank,
    both yield WithoutParameters.
    """
    if not request.include_parameters:
        return WithoutParameters()
    if request.style is None and request.length is None and request.tone is None:
        return WithoutParameters()
    return WithParameters(style=request.style, length=request.length, tone=request.tone)


def _parameter_section(mode: InstructionMode) -> str:
    if isinstance(mode, WithParameters):
        return WITH_PARAMETERS_SECTION.format(
            style=mode.style or UNSPECIFIED_PARAMETER,
            length=mode.length or UNSPECIFIED_PARAMETER,
            tone=mode.tone or UNSPECIFIED_PARAMETER,
        )
    if isinstance(mode, WithoutParameters):
        return WITHOUT_PARAMETERS_SECTION
    assert_never(mode)


def build_refinement_instruction(idea_text: str, mode: InstructionMode) -> str:
    """Assemble the full refinement instruction.

    Args:
        idea_text: The validated prompt idea.
        mode: Which parameter section to render.

    Returns:
        The instruction text. Identical arguments always produce identical
        text.
    """
    return "\n\n".join(
        [
            REFINEMENT_PREAMBLE.format(idea_text=idea_text),
            _parameter_section(mode),
            REFINEMENT_OUTPUT_CONTRACT,
        ]
    )


def build_instruction_for(request: RefinementRequest) -> str:
    """Shortcut for build_refinement_instruction(idea, resolve_mode(request))."""
    return build_refinement_instruction(request.idea_text, resolve_mode(request))


def build_suggestion_instruction(basic_prompt: str) -> str:
    """Assemble the parameter-suggestion instruction."""
    return PARAMETER_SUGGESTION_PROMPT.format(basic_prompt=basic_prompt)
