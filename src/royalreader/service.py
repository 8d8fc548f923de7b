from __future__ import annotations

import json
import logging
from typing import Protocol

from bs4 import BeautifulSoup  # type: ignore

from .document import (
    find_all_by_class,
    find_by_class,
    parse_document,
    require_attr,
    resolve_index_path,
    script_texts,
)
from .errors import UnrecognizedLayoutError
from .extraction import (
    CHAPTERS_MARKER,
    chapter_reference_from_entry,
    chapter_reference_from_row,
    flatten_content,
    locate_json_array,
    parse_unixtime,
)
from .models import Chapter, ChapterReference, Fiction

PUBLISHED_PATH = (3, 1, 3)
EDITED_PATH = (3, 3, 3)

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def get(self, path: str) -> str: ...


def fiction_path(fiction_id: int) -> str:
    return f"/fiction/{fiction_id}"


class FictionService:
    """Fetch fiction and chapter pages and turn them into typed records."""

    def __init__(self, client: Transport) -> None:
        self.client = client

    def fetch_fiction(self, fiction_id: int) -> Fiction:
        html = self.client.get(fiction_path(fiction_id))
        document = parse_document(html)
        heading = document.find("h1")
        if heading is None:
            raise UnrecognizedLayoutError(f"Fiction {fiction_id}: page has no title heading")
        title = heading.get_text().strip()
        chapters = _extract_chapter_list(document, fiction_id)
        logger.debug("Fiction %s %r: %d chapter(s)", fiction_id, title, len(chapters))
        return Fiction(id=fiction_id, title=title, chapters=chapters)

    def fetch_chapter(self, reference: ChapterReference) -> Chapter:
        html = self.client.get(reference.path)
        document = parse_document(html)
        profile_info = find_by_class(document, "profile-info")
        if profile_info is None:
            raise UnrecognizedLayoutError(f"{reference.path}: no chapter metadata region")
        published_node = resolve_index_path(profile_info, PUBLISHED_PATH)
        if published_node is None:
            raise UnrecognizedLayoutError(f"{reference.path}: publish date not found")
        published_at = parse_unixtime(require_attr(published_node, "unixtime", "publish date"), "unixtime")
        edited_node = resolve_index_path(profile_info, EDITED_PATH)
        if edited_node is None:
            edited_at = published_at
        else:
            edited_at = parse_unixtime(require_attr(edited_node, "unixtime", "edit date"), "unixtime")
        content = find_by_class(document, "chapter-content")
        if content is None:
            raise UnrecognizedLayoutError(f"{reference.path}: no chapter content")
        paragraphs = flatten_content(content)
        logger.debug("Chapter %s: %d paragraph(s)", reference.path, len(paragraphs))
        return Chapter(
            title=reference.title,
            path=reference.path,
            paragraphs=paragraphs,
            published_at=published_at,
            edited_at=edited_at,
        )


def _extract_chapter_list(document: BeautifulSoup, fiction_id: int) -> list[ChapterReference]:
    for text in script_texts(document):
        if CHAPTERS_MARKER not in text:
            continue
        return _chapters_from_script(text, fiction_id)
    rows = find_all_by_class(document, "chapter-row", "tr")
    if rows:
        return [chapter_reference_from_row(row) for row in rows]
    raise UnrecognizedLayoutError(f"Fiction {fiction_id}: no chapter list found")


def _chapters_from_script(text: str, fiction_id: int) -> list[ChapterReference]:
    try:
        payload = json.loads(locate_json_array(text, CHAPTERS_MARKER))
    except json.JSONDecodeError as exc:
        raise UnrecognizedLayoutError(f"Fiction {fiction_id}: chapter list is not valid JSON") from exc
    if not isinstance(payload, list):
        raise UnrecognizedLayoutError(f"Fiction {fiction_id}: chapter list is not an array")
    return [chapter_reference_from_entry(entry) for entry in payload]

