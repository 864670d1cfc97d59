from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from bible_reader.db import models
from bible_reader.library.history import now_ms


class BookmarkSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    start_line: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("start_line", "startLine"), serialization_alias="startLine"
    )


class BookmarkIn(BaseModel):
    """Bookmark as sent by a client or found in an exported settings file."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: Optional[int] = None
    title: str
    book: str
    chapter: int
    created_at: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt"), serialization_alias="createdAt"
    )
    notes: str = ""
    version_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("version_id", "versionId"), serialization_alias="versionId"
    )
    version_title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("version_title", "versionTitle"), serialization_alias="versionTitle"
    )
    outline_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("outline_id", "outlineId"), serialization_alias="outlineId"
    )
    outline_title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("outline_title", "outlineTitle"), serialization_alias="outlineTitle"
    )
    sections: Optional[list[BookmarkSection]] = None

    @field_validator("version_id", "outline_id", mode="before")
    @classmethod
    def _identifier_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


def _to_row_data(bookmark: BookmarkIn) -> dict:
    data = bookmark.model_dump(exclude={"id", "sections"})
    data["created_at"] = bookmark.created_at if bookmark.created_at is not None else now_ms()
    data["sections"] = [s.model_dump() for s in bookmark.sections] if bookmark.sections is not None else None
    return data


def add_bookmark(session: Session, bookmark: BookmarkIn) -> int:
    row = models.Bookmark(**_to_row_data(bookmark))
    if bookmark.id is not None and session.get(models.Bookmark, bookmark.id) is None:
        row.id = bookmark.id
    session.add(row)
    session.flush()
    return row.id


def get_bookmarks(session: Session) -> list[BookmarkIn]:
    rows = session.execute(select(models.Bookmark).order_by(models.Bookmark.created_at.desc())).scalars()
    return [BookmarkIn.model_validate(row) for row in rows]


def update_bookmark(session: Session, bookmark: BookmarkIn) -> bool:
    if bookmark.id is None:
        return False
    row = session.get(models.Bookmark, bookmark.id)
    if row is None:
        return False
    for key, value in _to_row_data(bookmark).items():
        setattr(row, key, value)
    session.flush()
    return True


def delete_bookmark(session: Session, bookmark_id: int) -> bool:
    row = session.get(models.Bookmark, bookmark_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True
