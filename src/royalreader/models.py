from __future__ import annotations

import time
from dataclasses import dataclass, field

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 365 * DAY

_AGE_UNITS = (
    (YEAR, "year"),
    (MONTH, "month"),
    (WEEK, "week"),
    (DAY, "day"),
    (HOUR, "hour"),
    (MINUTE, "minute"),
)

ELLIPSIS = "..."


def format_age(seconds: int) -> str:
    """Render a duration as its largest whole unit, e.g. ``"3 days"``."""
    seconds = max(int(seconds), 0)
    for size, unit in _AGE_UNITS:
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'' if count == 1 else 's'}"
    return f"{seconds} second{'' if seconds == 1 else 's'}"


@dataclass(frozen=True, slots=True)
class ChapterReference:
    path: str
    title: str
    published_at: int

    def display_label(self, width: int, now: float | None = None) -> str:
        current = time.time() if now is None else now
        age = format_age(int(current) - self.published_at)
        if width <= 0:
            return ""
        gap = max(width - len(self.title) - len(age), 3)
        room = width - len(age) - gap
        if room < 1:
            gap = 1
            room = width - len(age) - gap
        if room < 1:
            # Too narrow for both; the title wins.
            return self.title[:width]
        return f"{self.title[:room]}{' ' * gap}{age}"


@dataclass(slots=True)
class Fiction:
    id: int
    title: str
    chapters: list[ChapterReference] = field(default_factory=list)

    def display_label(self, width: int) -> str:
        if width <= 0:
            return ""
        if len(self.title) <= width:
            return self.title
        if width <= len(ELLIPSIS):
            return self.title[:width]
        return self.title[: width - len(ELLIPSIS)] + ELLIPSIS


@dataclass(slots=True)
class Chapter:
    title: str
    path: str
    paragraphs: list[str]
    published_at: int
    edited_at: int

    @property
    def was_edited(self) -> bool:
        return self.edited_at != self.published_at
