from __future__ import annotations

"""
Console Output Capability.

Renderers describe output as (role, text) segments; emitters decide what a
role looks like. This keeps the renderers independent of any concrete sink:
the same tree can be collected as plain lines, written to a terminal with
ANSI colors, or both at once.
"""

import sys
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TextIO

ROLE_TEXT = "text"
ROLE_STRUCTURE = "structure"
ROLE_SOLUTION_FOLDER = "solution_folder"
ROLE_PROJECT = "project"
ROLE_FOLDER = "folder"
ROLE_FILE = "file"
ROLE_SIZE = "size"
ROLE_ERROR = "error"

_ANSI_RESET = "\033[0m"
_ANSI_COLORS: Dict[str, str] = {
    ROLE_STRUCTURE: "\033[90m",
    ROLE_SOLUTION_FOLDER: "\033[35m",
    ROLE_PROJECT: "\033[36m",
    ROLE_FOLDER: "\033[34m",
    ROLE_FILE: "\033[32m",
    ROLE_SIZE: "\033[90m",
    ROLE_ERROR: "\033[31m",
}

# -----------------------------------------------------------------------------
# EMITTER INTERFACE
# -----------------------------------------------------------------------------

class Emitter(ABC):
    """
    Sink for role-tagged output segments.
    """

    @abstractmethod
    def emit(self, role: str, text: str) -> None:
        """Append a segment to the current line."""

    @abstractmethod
    def newline(self) -> None:
        """Terminate the current line."""

    def line(self, text: str = "", role: str = ROLE_TEXT) -> None:
        if text:
            self.emit(role, text)
        self.newline()

# -----------------------------------------------------------------------------
# CONCRETE EMITTERS
# -----------------------------------------------------------------------------

class LineEmitter(Emitter):
    """Collects plain-text lines, roles discarded."""

    def __init__(self) -> None:
        self.lines: List[str] = []
        self._current: List[str] = []

    def emit(self, role: str, text: str) -> None:
        self._current.append(text)

    def newline(self) -> None:
        self.lines.append("".join(self._current))
        self._current = []


class StreamEmitter(Emitter):
    """
    Writes segments to a text stream, coloring roles when enabled.

    Args:
        stream: Target stream, stdout by default.
        color: Force colors on/off; None enables them on a TTY.
    """

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        if color is None:
            color = bool(getattr(self._stream, "isatty", lambda: False)())
        self._color = color

    def emit(self, role: str, text: str) -> None:
        code = _ANSI_COLORS.get(role) if self._color else None
        if code:
            self._stream.write(f"{code}{text}{_ANSI_RESET}")
        else:
            self._stream.write(text)

    def newline(self) -> None:
        self._stream.write("\n")


class MultiEmitter(Emitter):
    """Fans every segment out to several emitters."""

    def __init__(self, *emitters: Emitter) -> None:
        self._emitters = emitters

    def emit(self, role: str, text: str) -> None:
        for e in self._emitters:
            e.emit(role, text)

    def newline(self) -> None:
        for e in self._emitters:
            e.newline()
