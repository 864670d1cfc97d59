from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from bible_reader.content.outcome import Outcome
from bible_reader.content.uploads import stored_outline_chapters
from bible_reader.core.tag_styles import TagRegistry
from bible_reader.db import repo
from bible_reader.parsing.chapter_slice import find_chapter, slice_boundary, split_chapters_by_marker
from bible_reader.parsing.footnotes import extract_chapter_footnotes
from bible_reader.parsing.line_tagger import tag_lines
from bible_reader.parsing.outline_models import ChapterBoundary, ChapterText, SectionOut
from bible_reader.parsing.tokens import FootnoteEntry, TaggedLine

logger = structlog.get_logger()


class ChapterView(BaseModel):
    book: Optional[str] = None
    chapter: int
    name: Optional[str] = None
    sections: list[SectionOut] = Field(default_factory=list)
    lines: list[TaggedLine]


@dataclass(frozen=True)
class _ChapterSlice:
    boundary: ChapterBoundary
    lines: list[str]


def _locate_chapter(
    session: Session,
    version_id: Optional[str],
    outline_id: Optional[str],
    book: str,
    chapter: int | str,
) -> Outcome[_ChapterSlice]:
    if not version_id or not outline_id:
        return Outcome.missing("Missing version or outline ID")

    version = repo.get_version(session, version_id)
    if version is None:
        return Outcome.not_found(f"Version {version_id} not found")
    outline = repo.get_outline(session, outline_id)
    if outline is None:
        return Outcome.not_found(f"Outline {outline_id} not found")

    boundary = find_chapter(stored_outline_chapters(outline), book, chapter)
    if boundary is None:
        return Outcome.not_found("Chapter not found in outline")

    lines = slice_boundary(version.content, boundary)
    logger.debug("chapter_sliced", book=book, chapter=str(chapter), lines=len(lines))
    return Outcome.success(_ChapterSlice(boundary=boundary, lines=lines))


def load_chapter(
    session: Session,
    version_id: Optional[str],
    outline_id: Optional[str],
    book: str,
    chapter: int | str,
    registry: TagRegistry,
) -> Outcome[ChapterView]:
    located = _locate_chapter(session, version_id, outline_id, book, chapter)
    if not located.ok:
        return Outcome(error=located.error, error_kind=located.error_kind)
    found = located.value
    return Outcome.success(
        ChapterView(
            book=book,
            chapter=found.boundary.number,
            name=found.boundary.name,
            sections=found.boundary.sections,
            lines=tag_lines(found.lines, registry, chapter),
        )
    )


def load_chapter_footnotes(
    session: Session,
    version_id: Optional[str],
    outline_id: Optional[str],
    book: str,
    chapter: int | str,
    registry: TagRegistry,
) -> Outcome[list[FootnoteEntry]]:
    located = _locate_chapter(session, version_id, outline_id, book, chapter)
    if not located.ok:
        return Outcome(error=located.error, error_kind=located.error_kind)
    return Outcome.success(extract_chapter_footnotes(located.value.lines, chapter, registry))


def list_marker_chapters(session: Session, version_id: Optional[str]) -> Outcome[list[ChapterText]]:
    """Chapters of a version split at its chapter markers, for reading without an outline."""
    if not version_id:
        return Outcome.missing("Missing version ID")
    version = repo.get_version(session, version_id)
    if version is None:
        return Outcome.not_found(f"Version {version_id} not found")
    return Outcome.success(split_chapters_by_marker(version.content))


def load_marker_chapter(
    session: Session,
    version_id: Optional[str],
    chapter: int,
    registry: TagRegistry,
) -> Outcome[ChapterView]:
    listed = list_marker_chapters(session, version_id)
    if not listed.ok:
        return Outcome(error=listed.error, error_kind=listed.error_kind)
    found = next((c for c in listed.value if c.number == chapter), None)
    if found is None:
        return Outcome.not_found("Chapter not found in version")
    return Outcome.success(ChapterView(chapter=found.number, lines=tag_lines(found.lines, registry, found.number)))
