from __future__ import annotations

import random
from dataclasses import dataclass

from royalreader.viewport import ListState


@dataclass(frozen=True)
class _Item:
    name: str

    def display_label(self, width: int) -> str:
        return self.name[:width]


def _items(count: int) -> list[_Item]:
    return [_Item(f"item-{i}") for i in range(count)]


def _forward(count: int) -> ListState[_Item]:
    return ListState(items=_items(count), reversed=False)


def _newest_first(count: int) -> ListState[_Item]:
    state: ListState[_Item] = ListState()
    state.replace_items(_items(count))
    return state


def test_move_selection_clamps() -> None:
    state = _forward(3)
    state.move_selection(-5)
    assert state.selected_index == 0
    state.move_selection(10)
    assert state.selected_index == 2


def test_empty_list_is_inert() -> None:
    state: ListState[_Item] = ListState()
    state.move_selection(3)
    state.recompute_window(5)
    state.toggle_reversed()
    assert state.selected_index == 0
    assert state.top_index == 0
    assert state.visible_slice(5) == []
    assert state.render_lines(10, 5) == []
    assert state.selected_item() is None
    assert state.remove_selected() is None


def test_window_scrolls_minimally() -> None:
    state = _forward(20)
    state.move_selection(7)
    state.recompute_window(5)
    assert (state.selected_index, state.top_index) == (7, 3)
    state.move_selection(-1)
    state.recompute_window(5)
    assert state.top_index == 3
    state.move_selection(-4)
    state.recompute_window(5)
    assert state.top_index == 2


def test_window_invariant_and_idempotence_hold_for_random_moves() -> None:
    rng = random.Random(7)
    for _ in range(500):
        count = rng.randint(1, 40)
        state = ListState(items=_items(count), reversed=rng.random() < 0.5)
        state.selected_index = rng.randint(0, count - 1)
        state.top_index = rng.randint(0, count - 1)
        height = rng.randint(1, 15)
        state.move_selection(rng.randint(-50, 50))
        state.recompute_window(height)
        assert 0 <= state.selected_index < count
        assert 0 <= state.top_index < count
        top = state.display_position(state.top_index)
        selected = state.display_position(state.selected_index)
        assert top <= selected < top + height
        snapshot = (state.selected_index, state.top_index)
        state.recompute_window(height)
        assert (state.selected_index, state.top_index) == snapshot


def test_shrinking_viewport_keeps_selection_visible() -> None:
    state = _forward(30)
    state.move_selection(20)
    state.recompute_window(25)
    assert state.top_index == 0
    state.recompute_window(4)
    assert state.top_index == 17
    assert state.selected_index - state.top_index < 4


def test_visible_slice_forward_and_reversed() -> None:
    state = _forward(5)
    state.top_index = 1
    assert [(row, item.name) for row, item in state.visible_slice(3)] == [
        (0, "item-1"),
        (1, "item-2"),
        (2, "item-3"),
    ]
    state.reversed = True
    state.top_index = 3
    assert [(row, item.name) for row, item in state.visible_slice(3)] == [
        (0, "item-3"),
        (1, "item-2"),
        (2, "item-1"),
    ]
    assert len(state.visible_slice(10)) == 4


def test_reversal_does_not_reorder_items() -> None:
    items = _items(4)
    state = ListState(items=list(items), reversed=False)
    state.toggle_reversed()
    state.toggle_reversed()
    state.toggle_reversed()
    assert state.items == items
    assert state.selected_item() == items[0]


def test_toggle_reversed_keeps_selected_item() -> None:
    state = _forward(5)
    state.move_selection(1)
    assert state.selected_item() == _Item("item-1")
    state.toggle_reversed()
    assert state.selected_index == 1
    assert state.selected_item() == _Item("item-1")
    lines = state.render_lines(width=6, viewport_height=3)
    assert [label for _, label, selected in lines if selected] == ["item-1"]
    state.toggle_reversed()
    assert state.selected_item() == _Item("item-1")


def test_move_selection_follows_screen_order_when_reversed() -> None:
    state = _newest_first(4)
    assert state.selected_item() == _Item("item-3")
    state.move_selection(1)
    assert state.selected_item() == _Item("item-2")
    state.move_selection(10)
    assert state.selected_item() == _Item("item-0")
    state.move_selection(-10)
    assert state.selected_item() == _Item("item-3")


def test_reversed_rendering_lists_newest_first() -> None:
    state = _newest_first(5)
    state.move_selection(1)
    lines = state.render_lines(width=6, viewport_height=3)
    assert lines == [(0, "item-4", False), (1, "item-3", True), (2, "item-2", False)]


def test_render_lines_marks_selection() -> None:
    state = _forward(4)
    state.move_selection(2)
    lines = state.render_lines(width=6, viewport_height=2)
    assert lines == [(0, "item-1", False), (1, "item-2", True)]


def test_remove_selected_reclamps() -> None:
    state = _forward(3)
    state.move_selection(2)
    removed = state.remove_selected()
    assert removed == _Item("item-2")
    assert state.selected_index == 1
    assert state.selected_item() == _Item("item-1")
    state.remove_selected()
    state.remove_selected()
    assert state.items == []
    assert state.selected_index == 0


def test_remove_selected_in_reversed_order() -> None:
    state = _newest_first(3)
    assert state.selected_item() == _Item("item-2")
    state.remove_selected()
    assert [item.name for item in state.items] == ["item-0", "item-1"]
    assert state.selected_item() == _Item("item-1")


def test_append_keeps_selected_item_when_reversed() -> None:
    state = _newest_first(3)
    state.move_selection(1)
    before = state.selected_item()
    state.append(_Item("item-3"))
    assert state.selected_item() == before
    state.recompute_window(2)
    top = state.display_position(state.top_index)
    assert top <= state.display_position(state.selected_index) < top + 2


def test_items_shrinking_under_the_cursor_is_reclamped() -> None:
    state = _forward(10)
    state.move_selection(9)
    state.recompute_window(3)
    state.items = state.items[:4]
    state.recompute_window(3)
    assert state.selected_index == 3
    assert state.top_index <= 3
