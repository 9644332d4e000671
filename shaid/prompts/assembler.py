"""Prompt assembly: instructions + system context + user request.

Pure text construction. Nothing here executes or interprets shell syntax;
the user's request is only whitespace-normalised.
"""

import logging
from dataclasses import dataclass
from typing import List

from shaid.context.system import SystemContext, render_fields

logger = logging.getLogger(__name__)

# Upper bound on the assembled prompt, in characters
MAX_PROMPT_CHARS = 8000

INSTRUCTIONS = """<instructions>
You translate natural language into exactly one shell command.
- Output only the command: no explanation, no markdown, no code fences
- The command must work on the operating system and shell in the system context
- Prefer common utilities and standard flags over scripts
- Never chain unrelated commands; one line only
</instructions>"""


@dataclass(frozen=True)
class Prompt:
    instructions: str
    context: str
    request: str
    truncated: bool = False

    @property
    def system(self) -> str:
        """Instructions and context, sent as the system message."""
        return _join(self.instructions, self.context)

    @property
    def text(self) -> str:
        """The full prompt blob: instructions, context, request."""
        return _compose(self.instructions, self.context, self.request)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends."""
    return " ".join((text or "").split())


def _join(*sections: str) -> str:
    return "\n\n".join(s for s in sections if s)


def _compose(instructions: str, context: str, request: str) -> str:
    return _join(instructions, context, f"<request>{request}</request>")


def assemble(
    user_text: str,
    context: SystemContext,
    max_chars: int = MAX_PROMPT_CHARS,
    instructions: str = INSTRUCTIONS,
) -> Prompt:
    """
    Build the prompt for one invocation.

    When the result would exceed ``max_chars``, context is shed before the
    request is touched:
    1. directory listing entries, last first
    2. the listing field itself (follows from 1 once it is empty)
    3. remaining context fields, last rendered first (memory ... os)
    4. only then the tail of the request

    Args:
        user_text: Natural-language description
        context: Collected SystemContext
        max_chars: Upper bound on len(prompt.text)
        instructions: Instruction preamble

    Returns:
        Prompt
    """
    request = normalize_whitespace(user_text)
    listing: List[str] = list(context.listing or [])
    pairs = context.fields(listing)
    truncated = False

    def size(pairs_: List[tuple], request_: str) -> int:
        return len(_compose(instructions, render_fields(pairs_), request_))

    while size(pairs, request) > max_chars and listing:
        listing.pop()
        pairs = context.fields(listing)
        truncated = True

    while size(pairs, request) > max_chars and pairs:
        pairs = pairs[:-1]
        truncated = True

    if size(pairs, request) > max_chars:
        budget = max(max_chars - size([], ""), 0)
        logger.warning(
            "Request truncated from %d to %d characters to fit the prompt limit",
            len(request),
            budget,
        )
        request = request[:budget]
        truncated = True

    rendered = render_fields(pairs)
    if truncated:
        logger.debug("Prompt context truncated to fit %d characters", max_chars)

    prompt = Prompt(
        instructions=instructions,
        context=rendered,
        request=request,
        truncated=truncated,
    )
    logger.debug("Assembled prompt: %d characters", len(prompt.text))
    return prompt

