"""Scrollable list state shared by the fiction list and the chapter list.

``selected_index`` and ``top_index`` always index ``items``. Reversal is a
display transform: it decides which screen row an item lands on, so
toggling it never changes which item is selected and never reorders the
underlying sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar


class Listable(Protocol):
    def display_label(self, width: int) -> str: ...


T = TypeVar("T", bound=Listable)


@dataclass
class ListState(Generic[T]):
    items: list[T] = field(default_factory=list)
    selected_index: int = 0
    top_index: int = 0
    reversed: bool = True

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def display_position(self, index: int) -> int:
        """Screen order position of ``items[index]``."""
        if self.reversed:
            return len(self.items) - 1 - index
        return index

    def item_index(self, position: int) -> int:
        """Index into ``items`` of the item shown at display ``position``."""
        # The mapping is its own inverse.
        return self.display_position(position)

    def selected_item(self) -> T | None:
        if not self.items:
            return None
        self._clamp_selection()
        return self.items[self.selected_index]

    def move_selection(self, delta: int) -> None:
        """Move the selection ``delta`` rows down the screen."""
        if not self.items:
            return
        self._clamp_selection()
        position = self.display_position(self.selected_index) + delta
        position = max(0, min(position, len(self.items) - 1))
        self.selected_index = self.item_index(position)

    def recompute_window(self, viewport_height: int) -> None:
        if not self.items:
            self.selected_index = 0
            self.top_index = 0
            return
        self._clamp_selection()
        height = max(viewport_height, 1)
        last = len(self.items) - 1
        selected = self.display_position(self.selected_index)
        top = self.display_position(max(0, min(self.top_index, last)))
        if top > selected:
            top = selected
        elif selected - top >= height:
            top = selected - height + 1
        self.top_index = self.item_index(max(top, 0))

    def toggle_reversed(self) -> None:
        self.reversed = not self.reversed
        # The old top row is now at the far end of the list; restart the
        # window at the selection so it stays on screen.
        self.top_index = self.selected_index

    def visible_slice(self, viewport_height: int) -> list[tuple[int, T]]:
        if not self.items or viewport_height <= 0:
            return []
        count = len(self.items)
        top = self.display_position(max(0, min(self.top_index, count - 1)))
        end = min(top + viewport_height, count)
        return [(position - top, self.items[self.item_index(position)]) for position in range(top, end)]

    def render_lines(self, width: int, viewport_height: int) -> list[tuple[int, str, bool]]:
        """Return ``(screen_row, label, is_selected)`` for every visible item."""
        self.recompute_window(viewport_height)
        if not self.items:
            return []
        selected_row = self.display_position(self.selected_index) - self.display_position(self.top_index)
        return [
            (row, item.display_label(width), row == selected_row)
            for row, item in self.visible_slice(viewport_height)
        ]

    def replace_items(self, items: list[T]) -> None:
        """Swap in new items and select the first row on screen."""
        self.items = list(items)
        self.selected_index = self.item_index(0) if self.items else 0
        self.top_index = self.selected_index

    def append(self, item: T) -> None:
        self.items.append(item)

    def remove_selected(self) -> T | None:
        """Remove the selected item; the selection stays on the same screen row."""
        if not self.items:
            return None
        self._clamp_selection()
        position = self.display_position(self.selected_index)
        removed_index = self.selected_index
        removed = self.items.pop(removed_index)
        if self.top_index > removed_index:
            self.top_index -= 1
        if not self.items:
            self.selected_index = 0
            self.top_index = 0
            return removed
        position = min(position, len(self.items) - 1)
        self.selected_index = self.item_index(position)
        self.top_index = max(0, min(self.top_index, len(self.items) - 1))
        return removed

    def _clamp_selection(self) -> None:
        if not self.items:
            self.selected_index = 0
            return
        self.selected_index = max(0, min(self.selected_index, len(self.items) - 1))
