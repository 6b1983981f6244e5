"""Terminal output for the session transcript."""

import os
import sys
from typing import TextIO

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
RED = "\x1b[31m"


def _supports_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class TerminalWriter:
    """Writes transcript fragments and tool lines, flushing after each write."""

    def __init__(self, stream: TextIO | None = None, color: bool | None = None):
        self._stream = stream if stream is not None else sys.stdout
        self._color = _supports_color(self._stream) if color is None else color

    def _style(self, text: str, *codes: str) -> str:
        if not self._color or not text:
            return text
        return "".join(codes) + text + RESET

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def header(self, text: str) -> None:
        self._write(self._style(text, BOLD) + "\n")

    def text(self, fragment: str) -> None:
        """Assistant text, written verbatim."""
        self._write(fragment)

    def status(self, label: str, detail: str | None = None) -> None:
        line = f"\n[tool {label}] {detail or ''}".rstrip()
        codes = (RED,) if label == "error" else (DIM,)
        self._write(self._style(line, *codes) + "\n")

    def output(self, text: str) -> None:
        """Tool output, always newline-terminated."""
        self._write(f"{text}\n")

    def error(self, text: str) -> None:
        self._write(self._style(text, RED) + "\n")

    def newline(self) -> None:
        self._write("\n")
