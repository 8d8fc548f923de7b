from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from bs4 import Tag  # type: ignore
from bs4.element import PageElement  # type: ignore

from .document import NodeKind, node_kind, require_attr, require_index_path
from .errors import (
    MalformedTimestampError,
    MarkerNotFoundError,
    MissingFieldError,
    UnbalancedBracketsError,
)
from .models import ChapterReference

CHAPTERS_MARKER = "window.chapters = "
ROW_TITLE_PATH = (1, 1, 0)

# Subtrees whose text never belongs to the chapter body.
SKIPPED_CONTENT_TAGS = frozenset({"script", "style"})


def locate_json_array(text: str, marker: str = CHAPTERS_MARKER, *, quote_aware: bool = True) -> str:
    """Return the bracket-balanced JSON array that follows ``marker`` in ``text``.

    The scan starts at the first ``[`` after the marker and stops at the
    character that brings the bracket depth back to zero. With ``quote_aware``
    brackets inside double-quoted strings are ignored; without it every ``[``
    and ``]`` counts, matching plain bracket counting.
    """
    found = text.find(marker)
    if found == -1:
        raise MarkerNotFoundError(f"Marker {marker!r} not found")
    start = text.find("[", found + len(marker))
    if start == -1:
        raise UnbalancedBracketsError(f"No array follows marker {marker!r}")

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        ch = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and quote_aware:
            in_string = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[start : pos + 1]
    raise UnbalancedBracketsError(
        f"Array after marker {marker!r} is not closed (depth {depth} at end of input)"
    )


def parse_unixtime(value: str, what: str = "timestamp") -> int:
    """Parse unsigned decimal unix seconds; signs, underscores and non-ASCII digits are rejected."""
    raw = value.strip() if isinstance(value, str) else ""
    if not (raw.isascii() and raw.isdigit()):
        raise MalformedTimestampError(f"Invalid {what}: {value!r}")
    return int(raw)


def parse_iso_timestamp(value: Any) -> int:
    """Convert an ISO-8601 date such as ``2021-05-03T14:22:01Z`` to unix seconds.

    Dates without an offset are taken as UTC.
    """
    if not isinstance(value, str):
        raise MalformedTimestampError(f"Invalid date: {value!r}")
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise MalformedTimestampError(f"Invalid date: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def chapter_reference_from_row(row: Tag) -> ChapterReference:
    """Build a reference from a ``<tr class="chapter-row">`` of a fiction page."""
    path = require_attr(row, "data-url", "chapter row")
    time_tag = row.find("time")
    if time_tag is None:
        raise MissingFieldError("chapter row has no <time> element")
    published_at = parse_unixtime(require_attr(time_tag, "unixtime", "chapter row <time>"), "unixtime")
    title_node = require_index_path(row, ROW_TITLE_PATH, "chapter row title")
    if node_kind(title_node) is not NodeKind.TEXT:
        raise MissingFieldError("chapter row title is not a text node")
    return ChapterReference(path=path, title=str(title_node).strip(), published_at=published_at)


def chapter_reference_from_entry(entry: Mapping[str, Any]) -> ChapterReference:
    """Build a reference from one object of the embedded ``window.chapters`` list."""
    if not isinstance(entry, Mapping):
        raise MissingFieldError(f"chapter entry is not an object: {entry!r}")
    fields: dict[str, str] = {}
    for name in ("url", "title"):
        value = entry.get(name)
        if not isinstance(value, str):
            raise MissingFieldError(f"chapter entry is missing '{name}'")
        fields[name] = value
    if "date" not in entry or entry["date"] is None:
        raise MissingFieldError("chapter entry is missing 'date'")
    return ChapterReference(
        path=fields["url"],
        title=fields["title"].strip(),
        published_at=parse_iso_timestamp(entry["date"]),
    )


def flatten_content(node: PageElement) -> list[str]:
    """Flatten a chapter body into paragraphs.

    Runs of text are joined into the current paragraph. A whitespace-only text
    node closes the paragraph, so authors' blank lines survive while repeated
    blank nodes collapse into a single break.
    """
    paragraphs: list[str] = []
    _collect_paragraphs(node, paragraphs)
    if paragraphs and not paragraphs[-1]:
        paragraphs.pop()
    return paragraphs


def _collect_paragraphs(node: PageElement, paragraphs: list[str]) -> None:
    kind = node_kind(node)
    if kind is NodeKind.ELEMENT:
        if node.name in SKIPPED_CONTENT_TAGS:
            return
        for child in node.children:
            _collect_paragraphs(child, paragraphs)
    elif kind is NodeKind.TEXT:
        text = str(node)
        if not text.strip():
            if paragraphs and paragraphs[-1]:
                paragraphs.append("")
            return
        if not paragraphs:
            paragraphs.append("")
        paragraphs[-1] += text
