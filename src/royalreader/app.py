"""Navigation state of the terminal reader and its key handlers.

The event loop owns one ``AppState`` and passes it to ``handle_key`` for
every key press; nothing here keeps module-level state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from .errors import ReaderError
from .models import Chapter, ChapterReference, Fiction
from .reading import ReadingPaneState
from .viewport import ListState

logger = logging.getLogger(__name__)


class Service(Protocol):
    def fetch_fiction(self, fiction_id: int) -> Fiction: ...

    def fetch_chapter(self, reference: ChapterReference) -> Chapter: ...


class Focus(Enum):
    FICTIONS = "fictions"
    CHAPTERS = "chapters"


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``code`` is a character or one of the named keys below."""

    code: str
    shift: bool = False
    pressed: bool = True


ENTER = "enter"
TAB = "tab"
BACKSPACE = "backspace"
ESCAPE = "escape"
UP = "up"
DOWN = "down"


@dataclass
class FictionInputState:
    text: str = ""
    active: bool = False

    def start(self) -> None:
        self.text = ""
        self.active = True

    def cancel(self) -> None:
        self.text = ""
        self.active = False

    def push(self, char: str) -> None:
        if char.isdigit():
            self.text += char

    def backspace(self) -> None:
        self.text = self.text[:-1]

    def submit(self) -> int | None:
        raw = self.text
        self.cancel()
        try:
            return int(raw)
        except ValueError:
            return None


@dataclass
class AppState:
    fictions: ListState[Fiction] = field(default_factory=ListState)
    chapters: ListState[ChapterReference] = field(default_factory=ListState)
    reading: ReadingPaneState = field(default_factory=ReadingPaneState)
    fiction_input: FictionInputState = field(default_factory=FictionInputState)
    focus: Focus = Focus.FICTIONS
    active_fiction_id: int | None = None
    status: str | None = None

    @classmethod
    def with_fictions(cls, fictions: list[Fiction]) -> "AppState":
        state = cls()
        state.fictions.replace_items(fictions)
        return state

    def tracked_ids(self) -> list[int]:
        return [fiction.id for fiction in self.fictions.items]

    def focused_list(self) -> ListState:
        return self.fictions if self.focus is Focus.FICTIONS else self.chapters


def handle_key(state: AppState, key: KeyEvent, service: Service) -> bool:
    """Apply one key event to ``state``. Returns True when the reader should quit."""
    if not key.pressed:
        return False
    if state.fiction_input.active:
        _handle_prompt_key(state, key, service)
        return False

    code = key.code
    if key.shift and len(code) == 1:
        upper = code.upper()
        if upper == "J":
            state.focused_list().move_selection(1)
        elif upper == "K":
            state.focused_list().move_selection(-1)
        elif upper == "R":
            refresh_selected_fiction(state, service)
        return False

    if code == "q":
        return True
    if code == "j":
        state.reading.scroll(1)
    elif code == "k":
        state.reading.scroll(-1)
    elif code == DOWN:
        state.focused_list().move_selection(1)
    elif code == UP:
        state.focused_list().move_selection(-1)
    elif code == TAB:
        state.focus = Focus.CHAPTERS if state.focus is Focus.FICTIONS else Focus.FICTIONS
    elif code == ENTER:
        if state.focus is Focus.FICTIONS:
            select_fiction(state)
        else:
            open_selected_chapter(state, service)
    elif code == "a":
        state.fiction_input.start()
        state.status = None
    elif code == "x":
        remove_selected_fiction(state)
    elif code == "r":
        state.focused_list().toggle_reversed()
    return False


def _handle_prompt_key(state: AppState, key: KeyEvent, service: Service) -> None:
    prompt = state.fiction_input
    if key.code == ESCAPE:
        prompt.cancel()
    elif key.code == BACKSPACE:
        prompt.backspace()
    elif key.code == ENTER:
        raw = prompt.text
        fiction_id = prompt.submit()
        if fiction_id is None:
            state.status = f"Invalid ID: {raw!r}"
            return
        add_fiction(state, service, fiction_id)
    elif len(key.code) == 1:
        prompt.push(key.code)


def add_fiction(state: AppState, service: Service, fiction_id: int) -> Fiction | None:
    if fiction_id in state.tracked_ids():
        state.status = f"Already tracking fiction {fiction_id}"
        return None
    try:
        fiction = service.fetch_fiction(fiction_id)
    except ReaderError as exc:
        logger.info("Fetching fiction %s failed: %s", fiction_id, exc)
        state.status = f"Invalid ID: {fiction_id}"
        return None
    state.fictions.append(fiction)
    state.status = f"Added {fiction.title}"
    return fiction


def select_fiction(state: AppState) -> None:
    fiction = state.fictions.selected_item()
    if fiction is None:
        return
    state.chapters.replace_items(fiction.chapters)
    state.active_fiction_id = fiction.id
    state.focus = Focus.CHAPTERS


def open_selected_chapter(state: AppState, service: Service) -> None:
    reference = state.chapters.selected_item()
    if reference is None:
        return
    try:
        chapter = service.fetch_chapter(reference)
    except ReaderError as exc:
        logger.info("Opening chapter %s failed: %s", reference.path, exc)
        state.status = f"Failed to open chapter: {reference.title}"
        return
    state.reading.open(chapter)
    state.status = None


def remove_selected_fiction(state: AppState) -> None:
    removed = state.fictions.remove_selected()
    if removed is None:
        return
    if removed.id == state.active_fiction_id:
        state.active_fiction_id = None
        state.chapters.replace_items([])
        state.reading.close()
    state.status = f"Removed {removed.title}"


def refresh_selected_fiction(state: AppState, service: Service) -> None:
    current = state.fictions.selected_item()
    if current is None:
        return
    try:
        fresh = service.fetch_fiction(current.id)
    except ReaderError as exc:
        logger.info("Refreshing fiction %s failed: %s", current.id, exc)
        state.status = f"Failed to refresh {current.title}"
        return
    state.fictions.items[state.fictions.selected_index] = fresh
    if fresh.id == state.active_fiction_id:
        # Indices point into the chapter sequence, which only grows at the end.
        selected = state.chapters.selected_index
        top = state.chapters.top_index
        state.chapters.replace_items(fresh.chapters)
        state.chapters.selected_index = selected
        state.chapters.top_index = top
    state.status = f"Refreshed {fresh.title}"
