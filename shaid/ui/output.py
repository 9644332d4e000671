"""
Diagnostics on stderr.

stdout is reserved for the generated command, so everything else the CLI
says goes through DiagnosticWriter.
"""

import sys
from typing import Optional, TextIO

ANSI_CODES = {
    "red": "31;1",
    "yellow": "33;1",
    "gray": "90",
}


def colorize(text: str, color: str) -> str:
    """
    Wrap text in an ANSI color sequence.

    Raises:
        KeyError: If the color has no ANSI code
    """
    return f"\033[{ANSI_CODES[color]}m{text}\033[0m"


class DiagnosticWriter:
    """Writes one-line messages to stderr, colored only on a terminal."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream
        self.color = color

    @property
    def target(self) -> TextIO:
        # Looked up per write so a swapped sys.stderr is honoured
        return self.stream if self.stream is not None else sys.stderr

    def error(self, message: str) -> None:
        self._write(message, "red")

    def warning(self, message: str) -> None:
        self._write(message, "yellow")

    def note(self, message: str) -> None:
        self._write(message, "gray")

    def _write(self, message: str, color: str) -> None:
        target = self.target
        use_color = self.color
        if use_color is None:
            isatty = getattr(target, "isatty", None)
            use_color = bool(isatty and isatty())

        target.write((colorize(message, color) if use_color else message) + "\n")
        target.flush()
