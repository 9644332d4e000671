from typing import Iterable, Optional
import re
from re import DOTALL

# First words that mark a line as conversational filler rather than a command
CHATTER_WORDS = frozenset(
    {
        "sure",
        "here",
        "here's",
        "heres",
        "certainly",
        "absolutely",
        "okay",
        "ok",
        "of",
        "this",
        "the",
        "you",
        "i",
        "i'll",
        "i'm",
        "note",
        "explanation",
        "below",
        "great",
        "alright",
    }
)

_COMMAND_TAG = re.compile(r"<command>(.*?)</command>", DOTALL)
_FENCE = re.compile(r"```[^\n`]*\n(.*?)```", DOTALL)
_LABEL = re.compile(r"^command\s*:\s*", re.IGNORECASE)
# Characters and flag tokens that prose lines do not contain
_SHELL_SYNTAX = re.compile(r"(?:^|\s)--?\w|[/|&;<>$=~*@\\]")


def _clean(line: str) -> str:
    line = line.strip()
    line = _LABEL.sub("", line)
    if len(line) >= 2 and line.startswith("`") and line.endswith("`"):
        line = line.strip("`").strip()
    if line.startswith("$ "):
        line = line[2:].strip()
    return line


def _is_chatter(line: str) -> bool:
    """True for lead-in/explanatory prose lines."""
    if line.endswith(":") and not _SHELL_SYNTAX.search(line):
        return True

    first_word = line.split()[0].lower().rstrip("!,.")
    if first_word in CHATTER_WORDS:
        return True

    # "Lists all files." - capitalised sentence with closing punctuation
    if re.match(r"^[A-Z][a-z]+\b", line) and line[-1] in ".!?":
        return True

    return False


def _first_command(lines: Iterable[str]) -> Optional[str]:
    for raw in lines:
        if raw.strip().startswith("```"):
            continue
        line = _clean(raw)
        if line and not _is_chatter(line):
            return line
    return None


def extract_command(response_text: str) -> Optional[str]:
    """
    Isolate the command from an LLM reply.

    Best effort: returns the first command-like line after dropping
    explanatory lead-in text, or None when nothing usable remains.

    Order:
    1. <command>...</command> tag
    2. first fenced code block
    3. first non-chatter line of the whole reply

    Example:
        >>> extract_command("Sure! Here's the command:\\nfind . -type f -mtime -7")
        'find . -type f -mtime -7'
    """
    if not response_text or not response_text.strip():
        return None

    tag_match = _COMMAND_TAG.search(response_text)
    if tag_match:
        command = _first_command(tag_match.group(1).splitlines())
        if command:
            return command

    fence_match = _FENCE.search(response_text)
    if fence_match:
        command = _first_command(fence_match.group(1).splitlines())
        if command:
            return command

    return _first_command(response_text.strip().splitlines())
