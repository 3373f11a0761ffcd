"""Dispatch of keyboard and mouse events to the viewer."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .viewer import SCROLL_LINES_PER_WHEEL, Viewer, ViewerAction


class Key(str, enum.Enum):
    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TAB = "tab"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``char`` is set for printable keys."""

    key: Key
    char: Optional[str] = None
    ctrl: bool = False


class MouseKind(enum.Enum):
    LEFT_DOWN = "left_down"
    LEFT_DRAG = "left_drag"
    LEFT_UP = "left_up"
    RIGHT_DOWN = "right_down"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    OTHER = "other"


@dataclass(frozen=True)
class MouseEvent:
    kind: MouseKind
    column: int
    row: int


def handle_event(viewer: Viewer, event) -> ViewerAction:
    """Apply an event to ``viewer`` and say whether the application should quit."""
    if isinstance(event, KeyEvent):
        if viewer.in_search_mode:
            return _handle_search_key(viewer, event)
        if viewer.context_menu is not None:
            return _handle_context_menu_key(viewer, event)
        return _handle_normal_key(viewer, event)
    if isinstance(event, MouseEvent):
        if viewer.context_menu is not None:
            return _handle_context_menu_mouse(viewer, event)
        return _handle_normal_mouse(viewer, event)
    return ViewerAction.NONE


def _handle_search_key(viewer: Viewer, event: KeyEvent) -> ViewerAction:
    if event.key is Key.ESC:
        viewer.exit_search_mode()
    elif event.key is Key.ENTER:
        viewer.request_search()
        viewer.exit_search_mode()
    else:
        viewer.handle_search_input(event.key, event.char, event.ctrl)
    return ViewerAction.NONE


def _handle_normal_key(viewer: Viewer, event: KeyEvent) -> ViewerAction:
    if event.key is Key.CHAR:
        if event.char == "q" or (event.char == "c" and event.ctrl):
            return ViewerAction.QUIT
        char_actions = {
            "/": viewer.enter_search_mode,
            "n": viewer.next_match,
            "N": viewer.prev_match,
            "g": viewer.goto_start,
            "G": viewer.goto_end,
        }
        action = char_actions.get(event.char)
    else:
        key_actions = {
            Key.ESC: viewer.clear_search,
            Key.UP: viewer.scroll_up,
            Key.DOWN: viewer.scroll_down,
            Key.PAGE_UP: viewer.page_up,
            Key.PAGE_DOWN: viewer.page_down,
            Key.HOME: viewer.goto_start,
            Key.END: viewer.goto_end,
        }
        action = key_actions.get(event.key)
    if action is not None:
        action()
    return ViewerAction.NONE


def _handle_context_menu_key(viewer: Viewer, event: KeyEvent) -> ViewerAction:
    if event.key is Key.ESC:
        viewer.close_context_menu()
    return ViewerAction.NONE


def _handle_normal_mouse(viewer: Viewer, event: MouseEvent) -> ViewerAction:
    kind = event.kind
    if kind is MouseKind.SCROLL_UP:
        viewer.scroll_up(SCROLL_LINES_PER_WHEEL)
    elif kind is MouseKind.SCROLL_DOWN:
        viewer.scroll_down(SCROLL_LINES_PER_WHEEL)
    elif kind is MouseKind.LEFT_DOWN:
        viewer.start_selection(event.column, event.row)
    elif kind is MouseKind.LEFT_DRAG:
        viewer.update_selection(event.column, event.row)
    elif kind is MouseKind.LEFT_UP:
        viewer.end_selection()
    elif kind is MouseKind.RIGHT_DOWN:
        viewer.show_context_menu(event.column, event.row)
    return ViewerAction.NONE


def _handle_context_menu_mouse(viewer: Viewer, event: MouseEvent) -> ViewerAction:
    if event.kind is MouseKind.LEFT_DOWN:
        if viewer.is_mouse_in_menu(event.column, event.row):
            viewer.handle_menu_click(event.column, event.row)
        else:
            viewer.close_context_menu()
    return ViewerAction.NONE