"""Unit tests for the instruction templates."""

from prompt_forge.core.prompts import (
    PARAMETER_SUGGESTION_PROMPT,
    REFINEMENT_OUTPUT_CONTRACT,
    REFINEMENT_PREAMBLE,
    WITH_PARAMETERS_SECTION,
    WITHOUT_PARAMETERS_SECTION,
)


class TestPromptConstants:
    """Tests for the template definitions."""

    def test_preamble_takes_idea(self) -> None:
        assert "{idea_text}" in REFINEMENT_PREAMBLE

    def test_preamble_says_instructions_not_content(self) -> None:
        assert "do NOT generate the final content" in REFINEMENT_PREAMBLE

    def test_with_section_has_all_placeholders(self) -> None:
        for placeholder in ("{style}", "{length}", "{tone}"):
            assert placeholder in WITH_PARAMETERS_SECTION

    def test_without_section_mentions_no_parameter(self) -> None:
        lowered = WITHOUT_PARAMETERS_SECTION.lower()
        assert "style" not in lowered
        assert "length" not in lowered
        assert "tone" not in lowered

    def test_output_contract_instructs_prompt_only(self) -> None:
        assert "ONLY be the refined prompt text" in REFINEMENT_OUTPUT_CONTRACT

    def test_suggestion_prompt_takes_basic_prompt(self) -> None:
        assert "{basic_prompt}" in PARAMETER_SUGGESTION_PROMPT

    def test_sections_are_distinct(self) -> None:
        assert WITH_PARAMETERS_SECTION != WITHOUT_PARAMETERS_SECTION
