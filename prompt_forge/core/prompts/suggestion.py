"""Instruction template for suggesting style/length/tone parameters."""

PARAMETER_SUGGESTION_PROMPT = """Given the following basic prompt, suggest optimal parameters (style, length, tone) to enhance it and tailor it to the desired output.

Basic Prompt: {basic_prompt}

Consider various styles (e.g., descriptive, narrative, persuasive), lengths (short, medium, long), and tones (formal, informal, humorous, serious).
Explain the reasoning behind each suggestion.

Output the suggestions in a structured format with suggestedStyle, suggestedLength, suggestedTone, and reasoning fields."""

SUGGESTION_SCHEMA_NAME = "parameter_suggestion"
SUGGESTION_SCHEMA_DESCRIPTION = (
    "Return the suggested style, length and tone along with the reasoning."
)
