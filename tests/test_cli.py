import curses
import json

import pytest

from bigview.cli import (
    load_file_with_progress,
    main,
    parse_args,
    read_event,
    run_viewer,
    search_with_ui_progress,
    translate_key,
)
from bigview.event_handler import Key, KeyEvent, MouseEvent, MouseKind
from bigview.file_reader import FileReader
from bigview.viewer import Viewer


class FakeScreen:
    def __init__(self, inputs=(), mouse=None, height=24, width=80):
        self.inputs = list(inputs)
        self.mouse = mouse
        self.height = height
        self.width = width
        self.refreshed = 0
        self.rows = {}

    def size(self):
        return self.height, self.width

    def clear(self):
        self.rows = {}

    def put(self, y, x, text, style=None):
        self.rows[(y, x)] = text

    def refresh(self):
        self.refreshed += 1

    def get_input(self):
        return self.inputs.pop(0) if self.inputs else None

    def get_mouse(self):
        return self.mouse


def test_parse_args():
    assert parse_args(["file.txt"]).file_path == "file.txt"


def test_parse_args_requires_path():
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.parametrize(
    "code, expected",
    [
        ("a", KeyEvent(Key.CHAR, "a")),
        (ord("q"), KeyEvent(Key.CHAR, "q")),
        ("\x1b", KeyEvent(Key.ESC)),
        ("\n", KeyEvent(Key.ENTER)),
        ("\x7f", KeyEvent(Key.BACKSPACE)),
        ("\x03", KeyEvent(Key.CHAR, "c", ctrl=True)),
        ("\x16", KeyEvent(Key.CHAR, "v", ctrl=True)),
        (curses.KEY_UP, KeyEvent(Key.UP)),
        (curses.KEY_NPAGE, KeyEvent(Key.PAGE_DOWN)),
        (curses.KEY_DC, KeyEvent(Key.DELETE)),
    ],
)
def test_translate_key(code, expected):
    assert translate_key(code) == expected


def test_translate_key_negative_is_none():
    assert translate_key(-1) is None


def test_read_event_timeout():
    assert read_event(FakeScreen()) is None


def test_read_event_key():
    assert read_event(FakeScreen(["/"])) == KeyEvent(Key.CHAR, "/")


def test_read_event_mouse():
    screen = FakeScreen([curses.KEY_MOUSE], mouse=(0, 10, 3, 0, curses.BUTTON1_PRESSED))
    assert read_event(screen) == MouseEvent(MouseKind.LEFT_DOWN, 10, 3)


def test_read_event_right_click():
    screen = FakeScreen([curses.KEY_MOUSE], mouse=(0, 4, 5, 0, curses.BUTTON3_PRESSED))
    assert read_event(screen) == MouseEvent(MouseKind.RIGHT_DOWN, 4, 5)


def test_load_small_file(tmp_path):
    path = tmp_path / "small.txt"
    path.write_bytes(b"a\nb\nc")
    screen = FakeScreen()
    reader = load_file_with_progress(screen, str(path))
    with reader:
        assert reader.get_lines(0, 3) == ["a", "b", "c"]
    assert screen.refreshed == 0


def test_load_large_file_shows_progress(tmp_path):
    line = b"x" * 1023 + b"\n"
    count = 10241
    path = tmp_path / "large.txt"
    path.write_bytes(line * count)
    screen = FakeScreen()
    reader = load_file_with_progress(screen, str(path))
    with reader:
        assert reader.line_count() == count + 1
        assert reader.get_line(0) == "x" * 1023
    assert screen.refreshed >= 1


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_file_with_progress(FakeScreen(), str(tmp_path / "missing.txt"))


def test_search_empty_term():
    viewer = Viewer(FileReader(b"a\nb"))
    viewer.search_matches = [1]
    viewer.request_search()
    search_with_ui_progress(FakeScreen(), viewer)
    assert viewer.search_matches == []
    assert viewer.search_requested is False


def test_search_small_file():
    viewer = Viewer(FileReader(b"a\nb\na"))
    viewer.search_input.insert("a")
    viewer.request_search()
    search_with_ui_progress(FakeScreen(), viewer)
    assert viewer.search_matches == [0, 2]
    assert viewer.search_requested is False


def _big_data():
    return b"x\n" * 100_000 + b"needle\n"


def test_search_large_file_in_background():
    viewer = Viewer(FileReader(_big_data()))
    viewer.search_input.insert("needle")
    viewer.request_search()
    screen = FakeScreen()
    search_with_ui_progress(screen, viewer)
    assert viewer.search_matches == [100_000]
    assert viewer.last_search_term == "needle"
    assert viewer.progress_visible is False
    assert screen.refreshed >= 1


def test_search_large_file_cancelled():
    viewer = Viewer(FileReader(_big_data()))
    viewer.search_input.insert("needle")
    viewer.request_search()
    search_with_ui_progress(FakeScreen(["\x1b"]), viewer)
    assert viewer.search_cancelled is True
    assert viewer.in_search_mode is True
    assert viewer.search_matches == []
    assert viewer.search_input.text == "needle"
    assert viewer.progress_visible is False


def test_run_viewer_scroll_and_quit():
    data = "\n".join(f"line{i}" for i in range(50)).encode()
    viewer = Viewer(FileReader(data))
    run_viewer(FakeScreen([curses.KEY_DOWN, "q"]), viewer)
    assert viewer.current_line == 1


def test_run_viewer_search_flow():
    viewer = Viewer(FileReader(b"a\nb\nc\nb"))
    run_viewer(FakeScreen(["/", "b", "\n", "q"]), viewer)
    assert viewer.search_matches == [1, 3]
    assert viewer.last_search_term == "b"
    assert viewer.in_search_mode is False


def test_main_without_terminal(tmp_path, capsys):
    path = tmp_path / "plain.txt"
    path.write_text("hello\n")
    assert main([str(path)]) == 1
    assert "Terminal not available" in capsys.readouterr().err


def test_main_formats_json_first(tmp_path, capsys):
    path = tmp_path / "data.json"
    path.write_text('{"b": 1, "a": [1, 2]}')
    assert main([str(path)]) == 1
    formatted = tmp_path / "data_formatted.json"
    assert json.loads(formatted.read_text()) == {"b": 1, "a": [1, 2]}
    assert "Terminal not available" in capsys.readouterr().err


def test_main_invalid_json(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    assert main([str(path)]) == 1
    assert "Error" in capsys.readouterr().err