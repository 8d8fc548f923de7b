from __future__ import annotations

import json
import random

import pytest

from royalreader.errors import MarkerNotFoundError, UnbalancedBracketsError
from royalreader.extraction import CHAPTERS_MARKER, locate_json_array


def _depths(fragment: str) -> list[int]:
    depth = 0
    seen = []
    for ch in fragment:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        seen.append(depth)
    return seen


def test_nested_array_is_isolated() -> None:
    text = "window.chapters = [1,[2,3],4]; done"
    assert locate_json_array(text, "window.chapters = ") == "[1,[2,3],4]"


def test_scan_skips_to_first_bracket_after_marker() -> None:
    text = 'var a = [9]; window.chapters =   \n [{"a": [1]}, {"b": {"c": []}}];\nwindow.x = [5];'
    assert locate_json_array(text, "window.chapters =") == '[{"a": [1]}, {"b": {"c": []}}]'


def test_missing_marker_raises() -> None:
    with pytest.raises(MarkerNotFoundError):
        locate_json_array("window.volumes = [];", CHAPTERS_MARKER)


def test_unclosed_array_raises() -> None:
    with pytest.raises(UnbalancedBracketsError):
        locate_json_array("window.chapters = [1, [2, 3]", CHAPTERS_MARKER)


def test_marker_without_array_raises() -> None:
    with pytest.raises(UnbalancedBracketsError):
        locate_json_array("window.chapters = null;", CHAPTERS_MARKER)


def test_brackets_inside_strings_do_not_end_the_array() -> None:
    entries = [
        {"title": "Side story ] part 1", "url": "/c/1"},
        {"title": "[Bonus] [[extra]]", "url": "/c/2"},
        {"title": 'Quote \\" ] inside', "url": "/c/3"},
    ]
    payload = json.dumps(entries)
    text = f"{CHAPTERS_MARKER}{payload};\nwindow.other = [1];"
    located = locate_json_array(text, CHAPTERS_MARKER)
    assert located == payload
    assert json.loads(located) == entries


def test_legacy_scan_counts_every_bracket() -> None:
    text = CHAPTERS_MARKER + '[{"title": "a ] b"}, 2]'
    assert locate_json_array(text, CHAPTERS_MARKER, quote_aware=False) == '[{"title": "a ]'


def test_random_well_bracketed_inputs_end_at_depth_zero() -> None:
    rng = random.Random(1234)

    def build(depth: int) -> str:
        parts = []
        for _ in range(rng.randint(0, 3)):
            if depth < 4 and rng.random() < 0.4:
                parts.append(build(depth + 1))
            else:
                parts.append(str(rng.randint(0, 99)))
        return "[" + ",".join(parts) + "]"

    for _ in range(200):
        array = build(0)
        text = f"prefix(); {CHAPTERS_MARKER}{array}; trailing = [1, [2]];"
        located = locate_json_array(text, CHAPTERS_MARKER)
        assert located == array
        depths = _depths(located)
        assert min(depths) >= 0
        assert depths[-1] == 0
        assert all(depth > 0 for depth in depths[:-1])
