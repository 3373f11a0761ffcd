"""Drawing of the viewer onto a character-cell screen.

A screen is any object with ``size() -> (height, width)``, ``clear()``,
``put(y, x, text, style)`` and ``refresh()``.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from .text_utils import Span
from .viewer import (
    CONTEXT_MENU_STYLE,
    CONTEXT_MENU_WIDTH,
    LINE_NUMBER_STYLE,
    PROGRESS_BAR_HEIGHT,
    PROGRESS_BAR_STYLE,
    SEARCH_INPUT_STYLE,
    STATUS_BAR_STYLE,
    ContextMenu,
    Style,
    Viewer,
)

_FILLED_STYLE = Style(fg=PROGRESS_BAR_STYLE.bg, bg=PROGRESS_BAR_STYLE.fg)
_CURSOR_STYLE = Style(fg="blue", bg="white")


class _Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


def layout(
    height: int, width: int, progress_visible: bool
) -> tuple[_Rect, Optional[_Rect], _Rect]:
    """Split the screen into content, optional progress bar and status bar areas."""
    height = max(height, 0)
    width = max(width, 0)
    status_height = min(1, height)
    progress_height = (
        min(PROGRESS_BAR_HEIGHT, height - status_height) if progress_visible else 0
    )
    content_height = height - status_height - progress_height
    content = _Rect(0, 0, width, content_height)
    progress = (
        _Rect(0, content_height, width, progress_height) if progress_visible else None
    )
    status = _Rect(0, content_height + progress_height, width, status_height)
    return content, progress, status


def format_line_number(line_num: int) -> str:
    """Return the gutter label for the zero-based line ``line_num``."""
    return f"{line_num + 1:6} "


def progress_label(value: float, message: str) -> str:
    """Return the text shown inside the progress bar."""
    return f"{value * 100:.1f}% - {message}"


def menu_position(menu: ContextMenu, screen_width: int, screen_height: int) -> tuple[int, int]:
    """Return where to draw ``menu`` so that it stays on screen."""
    menu_height = len(menu.items)
    x = (
        max(screen_width - CONTEXT_MENU_WIDTH, 0)
        if menu.x + CONTEXT_MENU_WIDTH > screen_width
        else menu.x
    )
    y = max(screen_height - menu_height, 0) if menu.y + menu_height > screen_height else menu.y
    return x, y


def _draw_box(screen, rect: _Rect, title: str) -> None:
    if rect.width < 2 or rect.height < 2:
        return
    inner = rect.width - 2
    screen.put(rect.y, rect.x, "┌" + (title + "─" * inner)[:inner] + "┐", None)
    for y in range(rect.y + 1, rect.y + rect.height - 1):
        screen.put(y, rect.x, "│", None)
        screen.put(y, rect.x + rect.width - 1, "│", None)
    screen.put(rect.y + rect.height - 1, rect.x, "└" + "─" * inner + "┘", None)


def _draw_spans(screen, y: int, x: int, spans: Sequence[Span], limit: int) -> None:
    for span in spans:
        if x >= limit:
            break
        text = span.text[: limit - x]
        if text:
            screen.put(y, x, text, span.style)
            x += len(text)


def _draw_content(screen, viewer: Viewer, rect: _Rect) -> None:
    _draw_box(screen, rect, "File Viewer")
    inner_rows = rect.height - 2
    if inner_rows <= 0 or rect.width <= 2:
        return
    lines = viewer.file_reader.get_lines(viewer.current_line, viewer.viewport_height)
    limit = rect.x + rect.width - 1
    for offset, line in enumerate(lines[:inner_rows]):
        line_num = viewer.current_line + offset
        spans = [Span(format_line_number(line_num), LINE_NUMBER_STYLE)]
        spans.extend(viewer.line_spans(line, line_num))
        _draw_spans(screen, rect.y + 1 + offset, rect.x + 1, spans, limit)


def _draw_progress(screen, viewer: Viewer, rect: _Rect) -> None:
    _draw_box(screen, rect, "Progress")
    inner_width = rect.width - 2
    if rect.height < 3 or inner_width <= 0:
        return
    label = progress_label(viewer.progress_value, viewer.progress_message)
    row = label.center(inner_width)[:inner_width]
    ratio = min(max(viewer.progress_value, 0.0), 1.0)
    filled = int(ratio * inner_width)
    x = rect.x + 1
    y = rect.y + 1
    if filled:
        screen.put(y, x, row[:filled], _FILLED_STYLE)
    if filled < inner_width:
        screen.put(y, x + filled, row[filled:], PROGRESS_BAR_STYLE)


def _draw_status(screen, viewer: Viewer, rect: _Rect) -> None:
    if rect.width <= 0 or rect.height <= 0:
        return
    if viewer.in_search_mode:
        text = viewer.search_input.text.ljust(rect.width)[: rect.width]
        screen.put(rect.y, rect.x, text, SEARCH_INPUT_STYLE)
        cursor = viewer.search_input.cursor
        if cursor < rect.width:
            screen.put(rect.y, rect.x + cursor, text[cursor], _CURSOR_STYLE)
    else:
        text = viewer.status_text().ljust(rect.width)[: rect.width]
        screen.put(rect.y, rect.x, text, STATUS_BAR_STYLE)


def _draw_context_menu(screen, menu: ContextMenu, width: int, height: int) -> None:
    x, y = menu_position(menu, width, height)
    for index, item in enumerate(menu.items):
        text = item.ljust(CONTEXT_MENU_WIDTH)[:CONTEXT_MENU_WIDTH]
        screen.put(y + index, x, text, CONTEXT_MENU_STYLE)


def draw(screen, viewer: Viewer) -> None:
    """Draw the whole viewer and update its viewport height to the content area."""
    height, width = screen.size()
    content, progress, status = layout(height, width, viewer.progress_visible)
    viewer.viewport_height = content.height

    screen.clear()
    _draw_content(screen, viewer, content)
    if viewer.context_menu is not None:
        _draw_context_menu(screen, viewer.context_menu, width, height)
    if progress is not None:
        _draw_progress(screen, viewer, progress)
    _draw_status(screen, viewer, status)
    screen.refresh()