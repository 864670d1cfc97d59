from __future__ import annotations

from typing import Iterable, Optional

from bible_reader.parsing.outline_models import ChapterBoundary, ChapterText

CHAPTER_MARKER = "<CM>"


def split_lines(content: str) -> list[str]:
    return [line.rstrip("\r") for line in content.split("\n")]


def slice_chapter(content: str, start_line: Optional[int], end_line: Optional[int]) -> list[str]:
    """Return lines start_line..end_line (1-based, inclusive) of a version.

    A missing or out of range start falls back to line 1, a missing, out of
    range or inverted end falls back to the last line.
    """
    lines = split_lines(content)
    total = len(lines)

    start = start_line if start_line and 1 <= start_line <= total else 1
    end = end_line if end_line and start <= end_line <= total else total
    return lines[start - 1:end]


def find_chapter(chapters: Iterable[ChapterBoundary], book: str, number: int | str) -> Optional[ChapterBoundary]:
    for chapter in chapters:
        if chapter.matches(book, number):
            return chapter
    return None


def slice_boundary(content: str, boundary: Optional[ChapterBoundary]) -> list[str]:
    if boundary is None:
        return slice_chapter(content, None, None)
    return slice_chapter(content, boundary.start_line, boundary.end_line)


def split_chapters_by_marker(content: str, marker: str = CHAPTER_MARKER) -> list[ChapterText]:
    """Split a whole version into chapters for versions without an outline.

    Blank lines are skipped; a line carrying the marker is the last line of
    its chapter.
    """
    chapters: list[ChapterText] = []
    current: list[str] = []
    for line in split_lines(content):
        if not line.strip():
            continue
        if marker in line:
            verse_line = line.replace(marker, "").strip()
            if verse_line:
                current.append(verse_line)
            if current:
                chapters.append(ChapterText(number=len(chapters) + 1, lines=current))
                current = []
            continue
        current.append(line)

    if current:
        chapters.append(ChapterText(number=len(chapters) + 1, lines=current))
    return chapters
