"""Parsed-HTML helpers shared by the extraction pipeline.

Pages are parsed with BeautifulSoup's ``html.parser`` builder, which keeps
whitespace-only text nodes between elements. The index paths used by the
extractors count those nodes, so the tree builder is fixed rather than
picked from whatever parser happens to be installed.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from bs4 import BeautifulSoup, Comment, Tag  # type: ignore
from bs4.element import PageElement, PreformattedString  # type: ignore

from .errors import MissingFieldError

HTML_PARSER = "html.parser"


class NodeKind(Enum):
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"


def parse_document(html: str | bytes) -> BeautifulSoup:
    return BeautifulSoup(html, HTML_PARSER)


def node_kind(node: PageElement) -> NodeKind:
    """Classify a node; markup strings other than plain text count as comments."""
    if isinstance(node, Tag):
        return NodeKind.ELEMENT
    if isinstance(node, Comment):
        return NodeKind.COMMENT
    # Doctype, CData and processing instructions carry no reader text either.
    if isinstance(node, PreformattedString):
        return NodeKind.COMMENT
    return NodeKind.TEXT


def resolve_index_path(node: PageElement, path: Sequence[int]) -> PageElement | None:
    """Follow ``path`` through successive ``contents`` lists.

    Returns ``None`` when any step runs past the children of the current node
    or lands on a text node before the path is exhausted.
    """
    current = node
    for index in path:
        if not isinstance(current, Tag):
            return None
        if index < 0 or index >= len(current.contents):
            return None
        current = current.contents[index]
    return current


def require_index_path(node: PageElement, path: Sequence[int], what: str) -> PageElement:
    target = resolve_index_path(node, path)
    if target is None:
        raise MissingFieldError(f"{what} not found at index path {list(path)}")
    return target


def require_attr(node: PageElement, name: str, what: str | None = None) -> str:
    value = node.get(name) if isinstance(node, Tag) else None
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        label = what or f"<{getattr(node, 'name', None) or 'text'}>"
        raise MissingFieldError(f"{label} is missing the '{name}' attribute")
    return value


def find_by_class(root: Tag, class_name: str, tag: str | None = None) -> Tag | None:
    return root.find(tag, class_=class_name)


def find_all_by_class(root: Tag, class_name: str, tag: str | None = None) -> list[Tag]:
    return list(root.find_all(tag, class_=class_name))


def script_texts(root: Tag) -> Iterable[str]:
    for script in root.find_all("script"):
        text = script.string if script.string is not None else script.get_text()
        if text:
            yield str(text)
