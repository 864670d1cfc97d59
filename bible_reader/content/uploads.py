from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from bible_reader.core.exceptions import ValidationError
from bible_reader.db import models, repo
from bible_reader.parsing.chapter_slice import split_lines
from bible_reader.parsing.outline_models import ChapterBoundary, OutlineDocument

logger = structlog.get_logger()


def _chapters_from_categories(categories: list[Any]) -> list[dict]:
    chapters: list[dict] = []
    for category in categories:
        if not isinstance(category, dict):
            continue
        for book in category.get("books") or []:
            if not isinstance(book, dict):
                continue
            book_name = book.get("name")
            for chapter in book.get("chapters") or []:
                if not isinstance(chapter, dict):
                    raise ValidationError(f"Invalid outline chapter in {book_name}: expected an object")
                sections = chapter.get("sections") or []
                if not isinstance(sections, list) or not all(isinstance(s, dict) for s in sections):
                    raise ValidationError(
                        f"Invalid outline sections in {book_name} chapter {chapter.get('chapter')}"
                    )
                last = sections[-1] if sections else None
                first = sections[0] if sections else None
                chapters.append(
                    {
                        "number": chapter.get("chapter"),
                        "name": f"{book_name} - Chapter {chapter.get('chapter')}",
                        "book": book_name,
                        "start_line": (first or {}).get("start_line") or chapter.get("start_line") or 1,
                        "end_line": (last or {}).get("end_line") or chapter.get("end_line"),
                        "sections": [
                            {"title": s.get("title", ""), "start_line": s.get("start_line")} for s in sections
                        ],
                    }
                )
    return chapters


def parse_outline_document(data: Any) -> OutlineDocument:
    """Normalize an uploaded outline into the flat chapter list.

    Accepts a document with a ``chapters`` list or the nested
    ``categories -> books -> chapters -> sections`` layout.
    """
    if not isinstance(data, dict) or not data.get("title"):
        raise ValidationError("Invalid outline format: a title is required")

    if isinstance(data.get("chapters"), list):
        raw_chapters = [
            {**chapter, "start_line": chapter.get("startLine") or chapter.get("start_line") or 1}
            for chapter in data["chapters"]
            if isinstance(chapter, dict)
        ]
    elif isinstance(data.get("categories"), list):
        raw_chapters = _chapters_from_categories(data["categories"])
    else:
        raise ValidationError("Invalid outline format: no chapters or categories")

    for chapter in raw_chapters:
        chapter.pop("startLine", None)

    try:
        return OutlineDocument(
            title=data["title"],
            description=data.get("description") or "",
            chapters=[ChapterBoundary.model_validate(chapter) for chapter in raw_chapters],
        )
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid outline chapter: {exc}") from exc


def upload_outline(session: Session, data: Any, outline_id: Optional[int] = None) -> models.BibleOutline:
    document = parse_outline_document(data)
    record = {
        "title": document.title,
        "description": document.description,
        "chapters": [chapter.model_dump(by_alias=True) for chapter in document.chapters],
    }
    if outline_id is not None:
        record["id"] = outline_id
    outline = repo.upsert_outline(session, record)
    logger.info("outline_uploaded", outline_id=outline.id, chapters=len(document.chapters))
    return outline


def upload_outline_file(session: Session, path: Path, outline_id: Optional[int] = None) -> models.BibleOutline:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ValidationError(f"Invalid outline JSON: {exc}") from exc
    return upload_outline(session, data, outline_id)


def upload_version(
    session: Session,
    title: str,
    content: str,
    language: Optional[str] = None,
    description: Optional[str] = None,
    version_id: Optional[int] = None,
) -> models.BibleVersion:
    if not title.strip():
        raise ValidationError("A version title is required")
    if not content.strip():
        raise ValidationError("Version content is empty")

    record: dict[str, Any] = {
        "title": title.strip(),
        "language": language,
        "description": description,
        "content": content,
    }
    if version_id is not None:
        record["id"] = version_id
    version = repo.upsert_version(session, record)
    logger.info("version_uploaded", version_id=version.id, lines=len(split_lines(content)))
    return version


def stored_outline_chapters(outline: models.BibleOutline) -> list[ChapterBoundary]:
    chapters: list[ChapterBoundary] = []
    for index, raw in enumerate(outline.chapters or []):
        try:
            chapters.append(ChapterBoundary.model_validate(raw))
        except PydanticValidationError as exc:
            logger.warning("outline_chapter_skipped", outline_id=outline.id, index=index, reason=str(exc))
    return chapters
