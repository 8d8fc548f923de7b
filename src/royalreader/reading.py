from __future__ import annotations

from dataclasses import dataclass, field

from .models import Chapter


def wrap_paragraph(paragraph: str, width: int) -> list[str]:
    """Greedy word wrap; a word longer than ``width`` gets a line of its own."""
    words = paragraph.split()
    if not words:
        return [""]
    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        if len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


@dataclass
class ReadingPaneState:
    paragraphs: list[str] = field(default_factory=list)
    paragraph_index: int = 0
    chapter: Chapter | None = None

    @property
    def is_reading(self) -> bool:
        return self.chapter is not None

    def open(self, chapter: Chapter) -> None:
        self.chapter = chapter
        self.paragraphs = list(chapter.paragraphs)
        self.paragraph_index = 0

    def close(self) -> None:
        self.chapter = None
        self.paragraphs = []
        self.paragraph_index = 0

    def scroll(self, delta: int) -> None:
        if not self.paragraphs:
            self.paragraph_index = 0
            return
        self.paragraph_index = max(0, min(self.paragraph_index + delta, len(self.paragraphs) - 1))

    def wrap(self, width: int, height: int) -> list[str]:
        """Display lines for a ``width`` x ``height`` pane starting at the cursor.

        Paragraphs after the first one in the window are preceded by a blank
        line.
        """
        lines: list[str] = []
        if height <= 0:
            return lines
        for offset, paragraph in enumerate(self.paragraphs[self.paragraph_index :]):
            if offset:
                if len(lines) >= height:
                    break
                lines.append("")
            for line in wrap_paragraph(paragraph, width):
                if len(lines) >= height:
                    break
                lines.append(line)
            if len(lines) >= height:
                break
        return lines
