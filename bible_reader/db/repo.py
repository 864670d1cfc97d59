from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from bible_reader.db import models


def _as_int(identifier: int | str | None) -> Optional[int]:
    if identifier is None:
        return None
    try:
        return int(identifier)
    except (TypeError, ValueError):
        return None


def upsert_version(session: Session, data: dict) -> models.BibleVersion:
    existing = session.get(models.BibleVersion, data["id"]) if data.get("id") is not None else None
    if existing:
        for key, value in data.items():
            setattr(existing, key, value)
        session.flush()
        return existing
    version = models.BibleVersion(**data)
    session.add(version)
    session.flush()
    return version


def upsert_outline(session: Session, data: dict) -> models.BibleOutline:
    existing = session.get(models.BibleOutline, data["id"]) if data.get("id") is not None else None
    if existing:
        for key, value in data.items():
            setattr(existing, key, value)
        session.flush()
        return existing
    outline = models.BibleOutline(**data)
    session.add(outline)
    session.flush()
    return outline


def get_version(session: Session, version_id: int | str) -> Optional[models.BibleVersion]:
    key = _as_int(version_id)
    return session.get(models.BibleVersion, key) if key is not None else None


def get_outline(session: Session, outline_id: int | str) -> Optional[models.BibleOutline]:
    key = _as_int(outline_id)
    return session.get(models.BibleOutline, key) if key is not None else None


def list_versions(session: Session) -> list[models.BibleVersion]:
    return list(session.execute(select(models.BibleVersion).order_by(models.BibleVersion.id)).scalars())


def list_outlines(session: Session) -> list[models.BibleOutline]:
    return list(session.execute(select(models.BibleOutline).order_by(models.BibleOutline.id)).scalars())


def get_value(session: Session, key: str) -> Optional[str]:
    row = session.get(models.KeyValue, key)
    return row.value if row else None


def set_value(session: Session, key: str, value: str) -> models.KeyValue:
    existing = session.get(models.KeyValue, key)
    if existing:
        existing.value = value
        existing.updated_at = dt.datetime.utcnow()
        session.flush()
        return existing
    row = models.KeyValue(key=key, value=value)
    session.add(row)
    session.flush()
    return row


def delete_value(session: Session, key: str) -> None:
    session.execute(delete(models.KeyValue).where(models.KeyValue.key == key))
    session.flush()
