from __future__ import annotations

from royalreader.models import DAY, HOUR, YEAR, ChapterReference, Fiction, format_age


def test_format_age_units() -> None:
    assert format_age(0) == "0 seconds"
    assert format_age(1) == "1 second"
    assert format_age(59) == "59 seconds"
    assert format_age(60) == "1 minute"
    assert format_age(3 * HOUR) == "3 hours"
    assert format_age(DAY) == "1 day"
    assert format_age(8 * DAY) == "1 week"
    assert format_age(45 * DAY) == "1 month"
    assert format_age(2 * YEAR) == "2 years"
    assert format_age(-5) == "0 seconds"


def test_chapter_label_right_aligns_age() -> None:
    reference = ChapterReference(path="/c", title="Short", published_at=1000)
    label = reference.display_label(20, now=1000 + 3 * DAY)
    assert label.startswith("Short")
    assert label.endswith("3 days")
    assert len(label) == 20


def test_chapter_label_cuts_long_titles() -> None:
    reference = ChapterReference(path="/c", title="A very long chapter title indeed", published_at=0)
    label = reference.display_label(20, now=2 * HOUR)
    assert label == "A very lon" + " " * 3 + "2 hours"
    assert len(label) == 20


def test_fiction_label_truncates_with_ellipsis() -> None:
    fiction = Fiction(id=1, title="The Wandering Inn")
    assert fiction.display_label(40) == "The Wandering Inn"
    assert fiction.display_label(10) == "The Wan..."
    assert len(fiction.display_label(10)) == 10
    assert fiction.display_label(2) == "Th"
    assert fiction.display_label(0) == ""


def test_chapter_label_never_exceeds_width() -> None:
    reference = ChapterReference(path="/c", title="Prologue", published_at=0)
    now = 3 * DAY
    assert reference.display_label(8, now=now) == "P 3 days"
    assert reference.display_label(6, now=now) == "Prolog"
    assert reference.display_label(0, now=now) == ""
    for width in range(0, 30):
        assert len(reference.display_label(width, now=now)) <= width
