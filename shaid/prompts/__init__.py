"""Prompt construction for shaid."""

from shaid.prompts.assembler import (
    INSTRUCTIONS,
    MAX_PROMPT_CHARS,
    Prompt,
    assemble,
    normalize_whitespace,
)

__all__ = [
    "INSTRUCTIONS",
    "MAX_PROMPT_CHARS",
    "Prompt",
    "assemble",
    "normalize_whitespace",
]
