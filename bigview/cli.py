"""Command-line entry point: terminal setup, input translation and the main loop."""

from __future__ import annotations

import argparse
import curses
import os
import queue
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, Union

from .event_handler import Key, KeyEvent, MouseEvent, MouseKind, handle_event
from .file_reader import FileReader, open_file
from .formatter import FormatError, format_if_needed
from .render import draw
from .viewer import Viewer, ViewerAction

_PROGRESS_FILE_SIZE = 10 * 1024 * 1024
_PROGRESS_LINE_COUNT = 100_000
_DRAW_INTERVAL = 0.2
_INPUT_TIMEOUT_MS = 100
_NO_TERMINAL = "Error: Terminal not available. This application requires a terminal to run."

_SPECIAL_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_ENTER: Key.ENTER,
}

_CONTROL_KEYS = {
    "\x1b": Key.ESC,
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
    "\t": Key.TAB,
}

_BUTTON5_PRESSED = getattr(curses, "BUTTON5_PRESSED", 0)


class _Cancelled(Exception):
    pass


class _CursesScreen:
    """Screen backed by a curses window."""

    def __init__(self, window):
        self.window = window
        self._pairs: dict = {}
        curses.raw()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self._default_colors = False
        if curses.has_colors():
            try:
                curses.use_default_colors()
                self._default_colors = True
            except curses.error:
                pass
        curses.set_escdelay(25)
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        curses.mouseinterval(0)
        window.keypad(True)
        window.timeout(_INPUT_TIMEOUT_MS)

    def size(self):
        return self.window.getmaxyx()

    def clear(self):
        self.window.erase()

    def put(self, y, x, text, style=None):
        try:
            self.window.addstr(y, x, text, self._attr(style))
        except curses.error:
            pass

    def refresh(self):
        self.window.refresh()

    def get_input(self):
        try:
            return self.window.get_wch()
        except curses.error:
            return None

    def get_mouse(self):
        try:
            return curses.getmouse()
        except curses.error:
            return None

    def _color(self, name):
        if name is None:
            return -1 if self._default_colors else curses.COLOR_BLACK
        if name == "dark_gray":
            return 8 if curses.COLORS > 8 else curses.COLOR_BLACK
        return getattr(curses, f"COLOR_{name.upper()}")

    def _attr(self, style):
        if style is None or not curses.has_colors():
            return curses.A_NORMAL
        pair = self._pairs.get(style)
        if pair is None:
            pair = len(self._pairs) + 1
            if pair >= curses.COLOR_PAIRS:
                return curses.A_REVERSE
            try:
                curses.init_pair(pair, self._color(style.fg), self._color(style.bg))
            except curses.error:
                return curses.A_NORMAL
            self._pairs[style] = pair
        return curses.color_pair(pair)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bigview", description="A fast file viewer for large text files"
    )
    parser.add_argument("file_path", help="Path to the file to view")
    return parser.parse_args(argv)


def translate_key(code: Union[str, int]) -> Optional[KeyEvent]:
    """Turn a curses key code or character into a key event; None for no key."""
    if isinstance(code, int):
        if code < 0:
            return None
        if code >= 256:
            return KeyEvent(_SPECIAL_KEYS.get(code, Key.OTHER))
        code = chr(code)
    if code in _CONTROL_KEYS:
        return KeyEvent(_CONTROL_KEYS[code])
    if len(code) == 1 and "\x01" <= code <= "\x1a":
        return KeyEvent(Key.CHAR, chr(ord(code) + 96), ctrl=True)
    if code.isprintable():
        return KeyEvent(Key.CHAR, code)
    return KeyEvent(Key.OTHER)


def _mouse_kind(bstate: int) -> MouseKind:
    if bstate & curses.BUTTON1_PRESSED:
        return MouseKind.LEFT_DOWN
    if bstate & curses.BUTTON1_RELEASED:
        return MouseKind.LEFT_UP
    if bstate & curses.BUTTON3_PRESSED:
        return MouseKind.RIGHT_DOWN
    if bstate & curses.BUTTON4_PRESSED:
        return MouseKind.SCROLL_UP
    if bstate & _BUTTON5_PRESSED:
        return MouseKind.SCROLL_DOWN
    if bstate & curses.REPORT_MOUSE_POSITION:
        return MouseKind.LEFT_DRAG
    return MouseKind.OTHER


def read_event(screen):
    """Wait briefly for input and return a key or mouse event, or None on timeout."""
    code = screen.get_input()
    if code is None:
        return None
    if code == curses.KEY_MOUSE:
        mouse = screen.get_mouse()
        if mouse is None:
            return None
        _, x, y, _, bstate = mouse
        return MouseEvent(_mouse_kind(bstate), x, y)
    return translate_key(code)


def load_file_with_progress(screen, file_path: str) -> FileReader:
    """Open and index ``file_path``, drawing a progress bar for large files."""
    try:
        size = os.path.getsize(file_path)
    except OSError:
        size = 0
    if size <= _PROGRESS_FILE_SIZE:
        return open_file(file_path)

    progress_viewer = Viewer()
    progress_viewer.show_progress(0.0, "Loading file...")
    updates: queue.Queue = queue.Queue()

    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(
            open_file, file_path, lambda value, message: updates.put((value, message))
        )
        last_draw = float("-inf")
        while True:
            try:
                value, message = updates.get(timeout=0.1)
            except queue.Empty:
                if future.done() and updates.empty():
                    break
                continue
            progress_viewer.show_progress(value, message)
            now = time.monotonic()
            if value >= 1.0:
                draw(screen, progress_viewer)
                break
            if now - last_draw >= _DRAW_INTERVAL:
                draw(screen, progress_viewer)
                last_draw = now
        return future.result()


def search_with_ui_progress(screen, viewer: Viewer) -> None:
    """Run the requested search, in the background with a progress bar for big files."""
    term = viewer.search_input.text
    if not term:
        viewer.search_matches = []
        viewer.search_requested = False
        return
    if viewer.file_reader.line_count() <= _PROGRESS_LINE_COUNT:
        viewer.perform_search()
        return

    context = viewer.file_reader.search_context()
    updates: queue.Queue = queue.Queue()
    cancelled = threading.Event()
    outcome: dict = {}

    def report(value: float, message: str) -> None:
        if cancelled.is_set():
            raise _Cancelled
        updates.put((value, message))

    def work() -> None:
        try:
            outcome["matches"] = context.search(term, report)
        except _Cancelled:
            pass
        except Exception as exc:  # handed back to the UI thread
            outcome["error"] = exc
        finally:
            updates.put(None)

    worker = threading.Thread(target=work, daemon=True)
    worker.start()
    viewer.show_progress(0.0, "Searching...")

    last_draw = float("-inf")
    finished = False
    while not finished:
        event = read_event(screen)
        if isinstance(event, KeyEvent) and event.key is Key.ESC:
            cancelled.set()
            viewer.cancel_search()
            return
        while True:
            try:
                item = updates.get_nowait()
            except queue.Empty:
                break
            if item is None:
                finished = True
                break
            value, message = item
            viewer.show_progress(value, message)
            if value >= 1.0:
                finished = True
        now = time.monotonic()
        if finished or now - last_draw >= _DRAW_INTERVAL:
            draw(screen, viewer)
            last_draw = now

    worker.join()
    if "error" in outcome:
        viewer.hide_progress()
        viewer.search_requested = False
        raise RuntimeError("Search failed") from outcome["error"]
    viewer.apply_search_results(term, outcome.get("matches", []))


def run_viewer(screen, viewer: Viewer) -> None:
    """Draw, search and dispatch input until the user quits."""
    while True:
        draw(screen, viewer)
        if viewer.search_requested:
            try:
                search_with_ui_progress(screen, viewer)
            except RuntimeError as exc:
                print(f"Search error: {exc}", file=sys.stderr)
        event = read_event(screen)
        if event is None:
            continue
        if handle_event(viewer, event) is ViewerAction.QUIT:
            break


def _set_drag_reporting(enabled: bool) -> None:
    sys.stdout.write("\x1b[?1002h" if enabled else "\x1b[?1002l")
    sys.stdout.flush()


def _run(window, file_path: str) -> None:
    screen = _CursesScreen(window)
    _set_drag_reporting(True)
    try:
        with load_file_with_progress(screen, file_path) as reader:
            run_viewer(screen, Viewer(reader))
    finally:
        _set_drag_reporting(False)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        file_path = format_if_needed(args.file_path)
    except FormatError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not sys.stdout.isatty() or not sys.stdin.isatty():
        print(_NO_TERMINAL, file=sys.stderr)
        return 1

    try:
        curses.wrapper(_run, file_path)
    except curses.error:
        print(_NO_TERMINAL, file=sys.stderr)
        return 1
    except (OSError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())