"""Instruction templates for AI-powered features.

Modules:
    refinement: Templates for turning a prompt idea into a refined prompt.
    suggestion: Template for suggesting style/length/tone parameters.
"""

from prompt_forge.core.prompts.refinement import (
    REFINEMENT_OUTPUT_CONTRACT,
    REFINEMENT_PREAMBLE,
    WITH_PARAMETERS_SECTION,
    WITHOUT_PARAMETERS_SECTION,
)
from prompt_forge.core.prompts.suggestion import PARAMETER_SUGGESTION_PROMPT

__all__ = [
    "PARAMETER_SUGGESTION_PROMPT",
    "REFINEMENT_OUTPUT_CONTRACT",
    "REFINEMENT_PREAMBLE",
    "WITH_PARAMETERS_SECTION",
    "WITHOUT_PARAMETERS_SECTION",
]
