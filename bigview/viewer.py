"""Viewer state: scrolling, searching, selection and the context menu."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .file_reader import FileReader, empty_reader
from .selection import Clipboard, Selection
from .text_utils import Span, char_len, split_line_into_spans

# Layout
LINE_NUMBER_WIDTH = 7
CONTEXT_MENU_WIDTH = 10
SCROLL_LINES_PER_WHEEL = 3
PROGRESS_BAR_HEIGHT = 3
DEFAULT_VIEWPORT_HEIGHT = 20

# Context menu entries
CONTEXT_MENU_COPY = "Copy"
CONTEXT_MENU_SEARCH = "Search"


@dataclass(frozen=True)
class Style:
    """Foreground and background colour names; None leaves the terminal default."""

    fg: Optional[str] = None
    bg: Optional[str] = None


LINE_NUMBER_STYLE = Style(fg="yellow")
SELECTION_STYLE = Style(fg="white", bg="blue")
CURRENT_MATCH_STYLE = Style(fg="black", bg="cyan")
OTHER_MATCH_STYLE = Style(fg="white", bg="dark_gray")
CONTEXT_MENU_STYLE = Style(fg="white", bg="dark_gray")
STATUS_BAR_STYLE = Style(fg="white", bg="blue")
PROGRESS_BAR_STYLE = Style(fg="green", bg="dark_gray")
SEARCH_INPUT_STYLE = Style(bg="blue")


class SearchInput:
    """A single-line text field with a cursor."""

    def __init__(self):
        self.text = ""
        self.cursor = 0

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0

    def insert(self, text: str) -> None:
        """Insert ``text`` at the cursor and move the cursor past it."""
        self.text = self.text[: self.cursor] + text + self.text[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> bool:
        """Delete the character before the cursor; return whether anything changed."""
        if self.cursor == 0:
            return False
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1
        return True

    def delete(self) -> bool:
        """Delete the character under the cursor; return whether anything changed."""
        if self.cursor >= len(self.text):
            return False
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        return True

    def move_left(self) -> bool:
        if self.cursor == 0:
            return False
        self.cursor -= 1
        return True

    def move_right(self) -> bool:
        if self.cursor >= len(self.text):
            return False
        self.cursor += 1
        return True

    def move_home(self) -> bool:
        moved = self.cursor != 0
        self.cursor = 0
        return moved

    def move_end(self) -> bool:
        moved = self.cursor != len(self.text)
        self.cursor = len(self.text)
        return moved


@dataclass
class ContextMenu:
    """A popup menu anchored at screen position ``(x, y)``."""

    x: int
    y: int
    items: list[str] = field(
        default_factory=lambda: [CONTEXT_MENU_COPY, CONTEXT_MENU_SEARCH]
    )

    def contains(self, col: int, row: int) -> bool:
        return (
            self.x <= col < self.x + CONTEXT_MENU_WIDTH
            and self.y <= row < self.y + len(self.items)
        )


class ViewerAction(enum.Enum):
    NONE = "none"
    QUIT = "quit"


def _find_all(text: str, needle: str) -> Iterator[int]:
    """Yield the start of every non-overlapping occurrence of ``needle``."""
    pos = text.find(needle)
    while pos != -1:
        yield pos
        pos = text.find(needle, pos + len(needle))


class Viewer:
    """All the state of the file viewer, independent of how it is drawn."""

    def __init__(
        self,
        file_reader: Optional[FileReader] = None,
        clipboard: Optional[Clipboard] = None,
    ):
        self.file_reader = file_reader if file_reader is not None else empty_reader()
        self.clipboard = clipboard if clipboard is not None else Clipboard()
        self.current_line = 0
        self.search_matches: list[int] = []
        self.current_match = 0
        self.in_search_mode = False
        self.viewport_height = DEFAULT_VIEWPORT_HEIGHT
        self.selection: Optional[Selection] = None
        self.selecting = False
        self.context_menu: Optional[ContextMenu] = None
        self.progress_visible = False
        self.progress_value = 0.0
        self.progress_message = ""
        self.search_requested = False
        self.search_cancelled = False
        self.last_search_term = ""
        self.search_input = SearchInput()

    # Search state

    def request_search(self) -> None:
        self.search_requested = True
        self.search_cancelled = False

    def clear_search(self) -> None:
        self.search_input.clear()
        self.search_matches = []
        self.current_match = 0
        self.search_requested = False
        self.search_cancelled = False
        self.last_search_term = ""

    def show_progress(self, value: float, message: str) -> None:
        self.progress_visible = True
        self.progress_value = value
        self.progress_message = message

    def hide_progress(self) -> None:
        self.progress_visible = False
        self.progress_value = 0.0
        self.progress_message = ""

    def enter_search_mode(self) -> None:
        self.in_search_mode = True
        self.search_input.clear()

    def exit_search_mode(self) -> None:
        self.in_search_mode = False

    def handle_search_input(self, key, char: Optional[str] = None, ctrl: bool = False) -> bool:
        """Apply a key press to the search field; return whether it changed."""
        if ctrl and char == "v":
            content = self.clipboard.get()
            if "\n" not in content and "\r" not in content:
                self.search_input.insert(content)
                return True
            return False
        if ctrl:
            return False
        if char is not None:
            self.search_input.insert(char)
            return True
        name = getattr(key, "value", key)
        actions = {
            "backspace": self.search_input.backspace,
            "delete": self.search_input.delete,
            "left": self.search_input.move_left,
            "right": self.search_input.move_right,
            "home": self.search_input.move_home,
            "end": self.search_input.move_end,
        }
        action = actions.get(name)
        return action() if action is not None else False

    def perform_search(self) -> None:
        """Search the whole file for the current term, on this thread."""
        term = self.search_input.text
        self.search_requested = False
        if not term:
            self.search_matches = []
            return
        self.apply_search_results(term, self.file_reader.search(term))

    def apply_search_results(self, term: str, matches: list[int]) -> None:
        """Install the results of a finished search and jump to the first match."""
        self.search_matches = list(matches)
        self.current_match = 0
        self.last_search_term = term
        if self.search_matches:
            self._center_on(self.search_matches[0])
        self.hide_progress()
        self.search_requested = False

    def cancel_search(self) -> None:
        """Abandon a running search and return to the search field with its text."""
        self.search_cancelled = True
        self.in_search_mode = True
        self.hide_progress()
        self.search_requested = False

    def _center_on(self, line: int) -> None:
        self.current_line = max(line - self.viewport_height // 2, 0)

    def next_match(self) -> None:
        if not self.search_matches:
            return
        self.current_match = (self.current_match + 1) % len(self.search_matches)
        self._center_on(self.search_matches[self.current_match])

    def prev_match(self) -> None:
        if not self.search_matches:
            return
        self.current_match = (self.current_match - 1) % len(self.search_matches)
        self._center_on(self.search_matches[self.current_match])

    # Navigation

    def _max_line(self) -> int:
        return max(self.file_reader.line_count() - self.viewport_height, 0)

    def scroll_up(self, count: int = 1) -> None:
        self.current_line = max(self.current_line - count, 0)

    def scroll_down(self, count: int = 1) -> None:
        max_line = self._max_line()
        if self.current_line < max_line:
            self.current_line = min(self.current_line + count, max_line)

    def page_up(self) -> None:
        self.current_line = max(self.current_line - self.viewport_height, 0)

    def page_down(self) -> None:
        self.current_line = min(self.current_line + self.viewport_height, self._max_line())

    def goto_start(self) -> None:
        self.current_line = 0

    def goto_end(self) -> None:
        total = self.file_reader.line_count()
        self.current_line = 0 if total <= self.viewport_height else total - self.viewport_height

    # Selection

    def start_selection(self, col: int, row: int) -> None:
        self.context_menu = None
        coords = self.screen_to_text_coords(col, row)
        if coords is not None:
            self.selection = Selection.at(*coords)
            self.selecting = True

    def update_selection(self, col: int, row: int) -> None:
        if not self.selecting or self.selection is None:
            return
        coords = self.screen_to_text_coords(col, row)
        if coords is not None:
            self.selection.update_end(*coords)

    def end_selection(self) -> None:
        self.selecting = False
        if self.selection is not None and self.selection.is_empty():
            self.selection = None

    # Context menu

    def show_context_menu(self, col: int, row: int) -> None:
        if self.selection is not None:
            self.context_menu = ContextMenu(col, row)

    def close_context_menu(self) -> None:
        self.context_menu = None

    def is_mouse_in_menu(self, col: int, row: int) -> bool:
        return self.context_menu is not None and self.context_menu.contains(col, row)

    def handle_menu_click(self, col: int, row: int) -> None:
        menu = self.context_menu
        if menu is not None:
            index = row - menu.y
            if 0 <= index < len(menu.items):
                if index == 0:
                    self._copy_selection()
                elif index == 1:
                    self._search_selection()
        self.context_menu = None

    def screen_to_text_coords(self, col: int, row: int) -> Optional[tuple[int, int]]:
        """Map a screen cell to ``(line, column)`` in the file, or None if outside the text."""
        if row == 0 or col < LINE_NUMBER_WIDTH:
            return None
        text_row = row - 1
        if text_row >= self.viewport_height:
            return None
        line_num = self.current_line + text_row
        if line_num >= self.file_reader.line_count():
            return None
        return line_num, col - LINE_NUMBER_WIDTH

    def _copy_selection(self) -> None:
        if self.selection is not None:
            try:
                self.selection.copy_to_clipboard(self.file_reader, self.clipboard)
            except OSError:
                pass

    def _search_selection(self) -> None:
        if self.selection is None:
            return
        text = self.selection.get_text(self.file_reader)
        if text is not None and "\n" not in text:
            self.search_input.clear()
            self.search_input.insert(text)
            self.request_search()

    # Presentation

    def line_spans(self, line: str, line_num: int) -> list[Span]:
        """Split a line into spans highlighted for the selection and search matches."""
        ranges = []
        if self.selection is not None and self.selection.contains_line(line_num):
            start_line, start_col, end_line, end_col = self.selection.normalize()
            start = start_col if line_num == start_line else 0
            end = end_col if line_num == end_line else char_len(line)
            ranges.append((start, end, SELECTION_STYLE))

        term = self.search_input.text
        if term and term in line:
            is_current = (
                0 <= self.current_match < len(self.search_matches)
                and self.search_matches[self.current_match] == line_num
            )
            for index, start in enumerate(_find_all(line, term)):
                style = CURRENT_MATCH_STYLE if is_current and index == 0 else OTHER_MATCH_STYLE
                ranges.append((start, start + len(term), style))

        if not ranges:
            return [Span(line)]
        return split_line_into_spans(line, ranges)

    def status_text(self) -> str:
        """Text of the status bar outside search mode."""
        total = self.file_reader.line_count()
        if self.search_matches:
            match_info = f" | Match {self.current_match + 1}/{len(self.search_matches)}"
        elif self.last_search_term:
            match_info = f" | No matches found for '{self.last_search_term}'"
        else:
            match_info = ""
        esc_hint = (
            ", esc: clear search" if self.search_matches or self.last_search_term else ""
        )
        return (
            f"Line {self.current_line + 1}/{total} | q: quit, /: search, "
            f"n: next match, g: start, G: end{match_info}{esc_hint}"
        )