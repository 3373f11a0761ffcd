import pytest

from bigview.file_reader import FileReader
from bigview.render import draw, format_line_number, layout, menu_position, progress_label
from bigview.viewer import (
    CONTEXT_MENU_STYLE,
    CONTEXT_MENU_WIDTH,
    CURRENT_MATCH_STYLE,
    LINE_NUMBER_WIDTH,
    PROGRESS_BAR_HEIGHT,
    SEARCH_INPUT_STYLE,
    STATUS_BAR_STYLE,
    ContextMenu,
    Selection,
    Viewer,
)


class FakeScreen:
    def __init__(self, height=12, width=60):
        self.height = height
        self.width = width
        self.refreshed = 0
        self.clear()

    def size(self):
        return self.height, self.width

    def clear(self):
        self.cells = [[" "] * self.width for _ in range(self.height)]
        self.styles = {}

    def put(self, y, x, text, style=None):
        for offset, ch in enumerate(text):
            if 0 <= y < self.height and 0 <= x + offset < self.width:
                self.cells[y][x + offset] = ch
                self.styles[(y, x + offset)] = style

    def refresh(self):
        self.refreshed += 1

    def row(self, y):
        return "".join(self.cells[y])


@pytest.mark.parametrize("height", [1, 5, 24, 100])
def test_layout_without_progress_fills_height(height):
    content, progress, status = layout(height, 80, False)
    assert progress is None
    assert content.height + status.height == height
    assert status.y == content.height
    assert status.height == 1


def test_layout_with_progress():
    content, progress, status = layout(24, 80, True)
    assert progress.height == PROGRESS_BAR_HEIGHT
    assert content.height == 24 - PROGRESS_BAR_HEIGHT - 1
    assert progress.y == content.height
    assert status.y == progress.y + progress.height
    assert content.width == progress.width == status.width == 80


def test_layout_small_screen_never_negative():
    content, progress, status = layout(2, 10, True)
    assert content.height >= 0
    assert content.height + progress.height + status.height == 2


def test_format_line_number():
    assert format_line_number(0) == "     1 "
    assert len(format_line_number(41)) == LINE_NUMBER_WIDTH


def test_progress_label():
    assert progress_label(0.5, "Searching...") == "50.0% - Searching..."


def test_menu_position_fits():
    menu = ContextMenu(5, 2)
    assert menu_position(menu, 80, 24) == (5, 2)


def test_menu_position_clamped():
    menu = ContextMenu(78, 23)
    assert menu_position(menu, 80, 24) == (80 - CONTEXT_MENU_WIDTH, 24 - len(menu.items))


def _viewer(data):
    return Viewer(FileReader(data))


def test_draw_sets_viewport_and_lines():
    screen = FakeScreen()
    viewer = _viewer(b"hello world\nfoo")
    draw(screen, viewer)
    assert viewer.viewport_height == layout(12, 60, False)[0].height
    assert screen.row(1)[1:].startswith(format_line_number(0) + "hello world")
    assert screen.row(2)[1:].startswith(format_line_number(1) + "foo")
    assert screen.refreshed == 1


def test_draw_status_bar():
    screen = FakeScreen()
    viewer = _viewer(b"a\nb")
    draw(screen, viewer)
    assert screen.row(11).startswith(viewer.status_text()[:60])
    assert screen.styles[(11, 0)] == STATUS_BAR_STYLE


def test_draw_highlights_current_match():
    screen = FakeScreen()
    viewer = _viewer(b"hello world\nfoo")
    viewer.search_input.insert("world")
    viewer.search_matches = [0]
    draw(screen, viewer)
    row = screen.row(1)
    x = row.index("world")
    assert screen.styles[(1, x)] == CURRENT_MATCH_STYLE
    assert screen.styles[(1, row.index("hello"))] is None


def test_draw_selection_styles_cells():
    screen = FakeScreen()
    viewer = _viewer(b"abcdef")
    viewer.selection = Selection(0, 1, 0, 3)
    draw(screen, viewer)
    row = screen.row(1)
    start = row.index("abcdef")
    assert screen.styles[(1, start)] is None
    assert screen.styles[(1, start + 1)] is not None
    assert screen.styles[(1, start + 1)] == screen.styles[(1, start + 2)]


def test_draw_search_mode_shows_input():
    screen = FakeScreen()
    viewer = _viewer(b"a")
    viewer.enter_search_mode()
    viewer.search_input.insert("abc")
    draw(screen, viewer)
    assert screen.row(11).startswith("abc")
    assert screen.styles[(11, 0)] == SEARCH_INPUT_STYLE


def test_draw_progress_label():
    screen = FakeScreen()
    viewer = _viewer(b"a")
    viewer.show_progress(0.25, "Indexing file...")
    draw(screen, viewer)
    label = progress_label(0.25, "Indexing file...")
    assert any(label in screen.row(y) for y in range(screen.height))
    assert viewer.viewport_height == layout(12, 60, True)[0].height


def test_draw_context_menu():
    screen = FakeScreen()
    viewer = _viewer(b"abc\ndef")
    viewer.context_menu = ContextMenu(20, 4)
    draw(screen, viewer)
    assert screen.row(4)[20:20 + CONTEXT_MENU_WIDTH].rstrip() == "Copy"
    assert screen.row(5)[20:20 + CONTEXT_MENU_WIDTH].rstrip() == "Search"
    assert screen.styles[(4, 20)] == CONTEXT_MENU_STYLE