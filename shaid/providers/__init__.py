"""Provider implementations for shaid.

One LangChain builder per vendor (openai, claude, gemini) plus the
dispatcher that sends a prompt and extracts the command.
"""

from shaid.providers.dispatcher import (
    classify_provider_error,
    dispatch,
    reply_text,
    send,
)

__all__ = ["classify_provider_error", "dispatch", "reply_text", "send"]
