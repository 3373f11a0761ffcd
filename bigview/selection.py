"""Text selections over a file reader and a simple clipboard."""

from __future__ import annotations

import base64
import sys
from dataclasses import dataclass
from typing import Optional, Protocol

from .text_utils import char_len, safe_substring


class LineSource(Protocol):
    def get_line(self, line_num: int) -> Optional[str]: ...


class Clipboard:
    """Holds copied text; on a terminal it also asks the terminal to copy it (OSC 52)."""

    def __init__(self):
        self._text = ""

    def get(self) -> str:
        """Return the most recently copied text."""
        return self._text

    def set(self, text: str) -> None:
        """Store ``text`` and forward it to the terminal clipboard when attached to one."""
        self._text = text
        stream = sys.stdout
        isatty = getattr(stream, "isatty", None)
        if stream is not None and isatty is not None and isatty():
            payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
            stream.write(f"\x1b]52;c;{payload}\x07")
            stream.flush()


@dataclass
class Selection:
    """A range of text from a start position to an end position, in either order."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @classmethod
    def at(cls, line: int, col: int) -> "Selection":
        """Return an empty selection anchored at ``(line, col)``."""
        return cls(line, col, line, col)

    def update_end(self, line: int, col: int) -> None:
        """Move the end of the selection."""
        self.end_line = line
        self.end_col = col

    def is_empty(self) -> bool:
        return self.start_line == self.end_line and self.start_col == self.end_col

    def normalize(self) -> tuple[int, int, int, int]:
        """Return ``(start_line, start_col, end_line, end_col)`` with start before end."""
        start = (self.start_line, self.start_col)
        end = (self.end_line, self.end_col)
        first, last = (start, end) if start <= end else (end, start)
        return (*first, *last)

    def contains_line(self, line: int) -> bool:
        start_line, _, end_line, _ = self.normalize()
        return start_line <= line <= end_line

    def get_text(self, file_reader: LineSource) -> Optional[str]:
        """Return the selected text, or None if it is empty."""
        start_line, start_col, end_line, end_col = self.normalize()

        if start_line == end_line:
            line = file_reader.get_line(start_line)
            result = safe_substring(line, start_col, end_col) if line is not None else ""
        else:
            parts: list[str] = []
            for line_num in range(start_line, end_line + 1):
                line = file_reader.get_line(line_num)
                if line is None:
                    continue
                if line_num == start_line:
                    parts.append(safe_substring(line, start_col, char_len(line)))
                elif line_num == end_line:
                    parts.append(safe_substring(line, 0, end_col))
                else:
                    parts.append(line)
                if line_num != end_line:
                    parts.append("\n")
            result = "".join(parts)

        return result or None

    def copy_to_clipboard(self, file_reader: LineSource, clipboard: Clipboard) -> None:
        """Put the selected text on ``clipboard``; does nothing for an empty selection."""
        text = self.get_text(file_reader)
        if text is not None:
            clipboard.set(text)