from __future__ import annotations

import time
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from bible_reader.core.config import get_settings
from bible_reader.db import models

logger = structlog.get_logger()


class HistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    book: str
    chapter: int
    timestamp: float
    version_id: Optional[str] = Field(default=None, serialization_alias="versionId")
    outline_id: Optional[str] = Field(default=None, serialization_alias="outlineId")


def now_ms() -> float:
    return float(int(time.time() * 1000))


def _optional_str(value: int | str | None) -> Optional[str]:
    return None if value is None else str(value)


def add_history_item(
    session: Session,
    book: str,
    chapter: int,
    version_id: int | str | None = None,
    outline_id: int | str | None = None,
    timestamp: float | None = None,
    limit: int | None = None,
) -> int:
    """Record a chapter visit and return the history id.

    A chapter already in the history only has its timestamp refreshed.
    """
    stamp = timestamp if timestamp is not None else now_ms()
    existing = session.execute(
        select(models.HistoryItem)
        .where(models.HistoryItem.book == book)
        .where(models.HistoryItem.chapter == chapter)
    ).scalar_one_or_none()

    if existing:
        existing.timestamp = stamp
        if version_id is not None:
            existing.version_id = _optional_str(version_id)
        if outline_id is not None:
            existing.outline_id = _optional_str(outline_id)
        session.flush()
        return existing.id

    item = models.HistoryItem(
        book=book,
        chapter=chapter,
        timestamp=stamp,
        version_id=_optional_str(version_id),
        outline_id=_optional_str(outline_id),
    )
    session.add(item)
    session.flush()
    prune_history(session, limit if limit is not None else get_settings().history_limit)
    return item.id


def prune_history(session: Session, keep: int) -> int:
    stale_ids = list(
        session.execute(
            select(models.HistoryItem.id)
            .order_by(models.HistoryItem.timestamp.desc(), models.HistoryItem.id.desc())
            .offset(keep)
        ).scalars()
    )
    if not stale_ids:
        return 0
    session.execute(delete(models.HistoryItem).where(models.HistoryItem.id.in_(stale_ids)))
    session.flush()
    logger.info("history_pruned", removed=len(stale_ids), kept=keep)
    return len(stale_ids)


def get_history(session: Session) -> list[HistoryOut]:
    rows = session.execute(
        select(models.HistoryItem).order_by(models.HistoryItem.timestamp.desc(), models.HistoryItem.id.desc())
    ).scalars()
    return [HistoryOut.model_validate(row) for row in rows]


def get_most_recent(session: Session) -> Optional[HistoryOut]:
    items = get_history(session)
    return items[0] if items else None


def delete_history_item(session: Session, item_id: int) -> bool:
    item = session.get(models.HistoryItem, item_id)
    if not item:
        return False
    session.delete(item)
    session.flush()
    return True


def clear_history(session: Session) -> None:
    session.execute(delete(models.HistoryItem))
    session.flush()
