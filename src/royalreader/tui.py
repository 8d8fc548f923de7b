"""curses front end: three bordered panes and a status line."""

from __future__ import annotations

import curses
import time
from dataclasses import dataclass

from .app import (
    BACKSPACE,
    DOWN,
    ENTER,
    ESCAPE,
    TAB,
    UP,
    AppState,
    Focus,
    KeyEvent,
    Service,
    handle_key,
)
from .models import format_age
from .viewport import ListState

LIST_MARGIN = (2, 1)
READING_MARGIN = (3, 2)
TITLE = "Royal Reader"
HELP = "a add  x remove  Tab switch  J/K select  Enter open  j/k scroll  r reverse  R refresh  q quit"

_PAIR_BORDER = 1
_PAIR_SELECTED = 2
_PAIR_TEXT = 3

_NAMED_KEYS = {
    "\n": ENTER,
    "\r": ENTER,
    "\t": TAB,
    "\x1b": ESCAPE,
    "\x7f": BACKSPACE,
    "\b": BACKSPACE,
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
}


@dataclass
class Pane:
    y: int
    x: int
    height: int
    width: int


def layout(rows: int, cols: int) -> tuple[Pane, Pane, Pane]:
    """Split the screen 20/20/60 above a one-line status bar."""
    body = max(rows - 1, 0)
    left = cols * 20 // 100
    middle = cols * 20 // 100
    right = max(cols - left - middle, 0)
    return (
        Pane(0, 0, body, left),
        Pane(0, left, body, middle),
        Pane(0, left + middle, body, right),
    )


def translate_key(raw: str | int) -> KeyEvent | None:
    """Turn a ``get_wch`` result into a KeyEvent; curses only reports presses."""
    named = _NAMED_KEYS.get(raw)
    if named is not None:
        return KeyEvent(named)
    if isinstance(raw, str) and len(raw) == 1 and raw.isprintable():
        return KeyEvent(raw, shift=raw.isupper())
    return None


def draw_line(win, row: int, col: int, text: str, width: int, attr: int = 0) -> None:
    if width <= 0 or row < 0 or col < 0:
        return
    try:
        win.addnstr(row, col, text, width, attr)
    except curses.error:
        # Writing into the bottom-right cell moves the cursor off screen.
        pass


def _color(pair: int) -> int:
    return curses.color_pair(pair) if curses.has_colors() else 0


def _init_screen() -> None:
    curses.curs_set(0)
    if curses.has_colors():
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(_PAIR_BORDER, curses.COLOR_BLUE, -1)
        curses.init_pair(_PAIR_SELECTED, curses.COLOR_BLACK, curses.COLOR_BLUE)
        curses.init_pair(_PAIR_TEXT, curses.COLOR_WHITE, -1)


def _draw_box(stdscr, pane: Pane, title: str, focused: bool) -> None:
    if pane.height < 2 or pane.width < 2:
        return
    attr = _color(_PAIR_BORDER) | (curses.A_BOLD if focused else 0)
    win = stdscr.derwin(pane.height, pane.width, pane.y, pane.x)
    win.attron(attr)
    win.box()
    win.attroff(attr)
    draw_line(win, 0, 2, f" {title} ", pane.width - 4, attr)


def _draw_list(stdscr, pane: Pane, state: ListState) -> None:
    margin_x, margin_y = LIST_MARGIN
    width = pane.width - 2 - 2 * margin_x
    height = pane.height - 2 - 2 * margin_y
    if width <= 0 or height <= 0:
        return
    for row, label, selected in state.render_lines(width, height):
        attr = _color(_PAIR_SELECTED) if selected else _color(_PAIR_TEXT)
        draw_line(stdscr, pane.y + 1 + margin_y + row, pane.x + 1 + margin_x, label, width, attr)


def _draw_reading(stdscr, pane: Pane, state: AppState) -> None:
    margin_x, margin_y = READING_MARGIN
    width = pane.width - 2 - 2 * margin_x
    top = pane.y + 1 + margin_y
    left = pane.x + 1 + margin_x
    chapter = state.reading.chapter
    if chapter is None:
        middle = pane.y + pane.height // 2
        draw_line(stdscr, middle, pane.x + max((pane.width - len(TITLE)) // 2, 1), TITLE, pane.width - 2, curses.A_BOLD)
        return
    now = time.time()
    header = f"{chapter.title}  ({format_age(int(now) - chapter.published_at)} ago"
    if chapter.was_edited:
        header += f", edited {format_age(int(now) - chapter.edited_at)} ago"
    header += ")"
    draw_line(stdscr, top, left, header, width, curses.A_BOLD)
    height = pane.height - 2 - 2 * margin_y - 2
    if width <= 0 or height <= 0:
        return
    for offset, line in enumerate(state.reading.wrap(width, height)):
        draw_line(stdscr, top + 2 + offset, left, line, width, _color(_PAIR_TEXT))


def _draw_status(stdscr, row: int, cols: int, state: AppState) -> None:
    if state.fiction_input.active:
        text = f"Fiction ID: {state.fiction_input.text}_"
    else:
        text = state.status or HELP
    draw_line(stdscr, row, 0, text, cols - 1, curses.A_REVERSE if state.status else 0)


def draw(stdscr, state: AppState) -> None:
    stdscr.erase()
    rows, cols = stdscr.getmaxyx()
    fictions_pane, chapters_pane, content_pane = layout(rows, cols)
    _draw_box(stdscr, fictions_pane, "Fictions", state.focus is Focus.FICTIONS)
    _draw_box(stdscr, chapters_pane, "Chapters", state.focus is Focus.CHAPTERS)
    _draw_box(stdscr, content_pane, "Content", False)
    _draw_list(stdscr, fictions_pane, state.fictions)
    _draw_list(stdscr, chapters_pane, state.chapters)
    _draw_reading(stdscr, content_pane, state)
    _draw_status(stdscr, rows - 1, cols, state)
    stdscr.noutrefresh()
    curses.doupdate()


def run(stdscr, state: AppState, service: Service) -> AppState:
    _init_screen()
    stdscr.keypad(True)
    while True:
        draw(stdscr, state)
        try:
            raw = stdscr.get_wch()
        except KeyboardInterrupt:
            break
        if raw == curses.KEY_RESIZE:
            continue
        key = translate_key(raw)
        if key is None:
            continue
        if handle_key(state, key, service):
            break
    return state


def launch(state: AppState, service: Service) -> AppState:
    return curses.wrapper(run, state, service)
