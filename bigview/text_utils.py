"""Character-aware text helpers for slicing lines and splitting them into styled spans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

StyledRange = Tuple[int, int, Any]


@dataclass(frozen=True)
class Span:
    """A run of text with an optional style; ``style`` is None for plain text."""

    text: str
    style: Any = None


def char_len(text: str) -> int:
    """Return the number of characters (not bytes) in ``text``."""
    return len(text)


def safe_substring(text: str, start: int, end: int) -> str:
    """Slice ``text`` by character indices, clamping both ends to the text length."""
    length = len(text)
    start = max(0, min(start, length))
    end = max(0, min(end, length))
    if start >= end:
        return ""
    return text[start:end]


def split_line_into_spans(line: str, ranges: Sequence[StyledRange]) -> list[Span]:
    """Split ``line`` into spans styled by ``(start, end, style)`` character ranges.

    Where ranges overlap, the most recently opened range that is still active wins.
    Ranges are clamped to the line; empty ranges are ignored.
    """
    if not ranges:
        return [Span(line)]

    length = len(line)
    events: list[tuple[int, bool, Any]] = []
    for start, end, style in sorted(ranges, key=lambda item: item[0]):
        start = min(start, length)
        end = min(end, length)
        if start < end:
            events.append((start, True, style))
            events.append((end, False, style))

    # End events sort before start events at the same position.
    events.sort(key=lambda event: (event[0], event[1]))

    segments: list[tuple[int, int, Any]] = []
    active: list[Any] = []
    last_pos = 0
    for pos, is_start, style in events:
        if pos > last_pos:
            segments.append((last_pos, pos, active[-1] if active else None))
        if is_start:
            active.append(style)
        else:
            active = [item for item in active if item != style]
        last_pos = pos

    if last_pos < length:
        segments.append((last_pos, length, None))

    return [Span(line[start:end], style) for start, end, style in segments if start < end]