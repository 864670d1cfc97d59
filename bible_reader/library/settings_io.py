from __future__ import annotations

import datetime as dt
import json
from typing import Any, Optional

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from bible_reader.core.tag_styles import (
    TAG_STYLES_KEY,
    dump_tag_styles,
    load_tag_styles,
    save_tag_styles,
    validate_tag_styles,
)
from bible_reader.db.kv_store import SessionKeyValueStore
from bible_reader.library.bookmarks import BookmarkIn, add_bookmark, get_bookmarks

logger = structlog.get_logger()

EXPORT_FORMAT_VERSION = 1
DISPLAY_SETTINGS_KEY = "bibleReaderDisplaySettings"
LAST_READ_KEY = "lastOpenedBible"


class ImportResult(BaseModel):
    success: bool
    message: str


def _get_json(store: SessionKeyValueStore, key: str) -> Optional[Any]:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("stored_value_unreadable", key=key)
        return None


def get_display_settings(session: Session) -> Optional[dict]:
    value = _get_json(SessionKeyValueStore(session), DISPLAY_SETTINGS_KEY)
    return value if isinstance(value, dict) else None


def store_display_settings(session: Session, settings: dict) -> None:
    SessionKeyValueStore(session).set(DISPLAY_SETTINGS_KEY, json.dumps(settings))


def get_last_read(session: Session) -> Optional[dict]:
    value = _get_json(SessionKeyValueStore(session), LAST_READ_KEY)
    return value if isinstance(value, dict) else None


def store_last_read(session: Session, data: dict) -> None:
    SessionKeyValueStore(session).set(LAST_READ_KEY, json.dumps(data))


def export_settings(session: Session) -> str:
    store = SessionKeyValueStore(session)
    has_custom_styles = store.get(TAG_STYLES_KEY) is not None
    payload = {
        "version": EXPORT_FORMAT_VERSION,
        "exportDate": dt.datetime.now(dt.timezone.utc).isoformat(),
        "displaySettings": get_display_settings(session),
        "lastRead": get_last_read(session),
        "bookmarks": [b.model_dump(by_alias=False) for b in get_bookmarks(session)],
        "tagStyles": dump_tag_styles(load_tag_styles(store)) if has_custom_styles else None,
    }
    return json.dumps(payload, indent=2)


def import_settings(session: Session, json_data: str) -> ImportResult:
    try:
        data = json.loads(json_data)
    except ValueError as exc:
        return ImportResult(success=False, message=f"Failed to import settings: {exc}")

    if not isinstance(data, dict):
        return ImportResult(success=False, message="Invalid settings data format")

    if isinstance(data.get("displaySettings"), dict):
        store_display_settings(session, data["displaySettings"])
    if isinstance(data.get("lastRead"), dict):
        store_last_read(session, data["lastRead"])

    if data.get("tagStyles"):
        styles = validate_tag_styles(data["tagStyles"])
        if styles:
            save_tag_styles(SessionKeyValueStore(session), styles)

    bookmarks = data.get("bookmarks")
    if isinstance(bookmarks, list):
        existing_ids = {b.id for b in get_bookmarks(session)}
        imported = 0
        for raw in bookmarks:
            try:
                bookmark = BookmarkIn.model_validate(raw)
            except PydanticValidationError as exc:
                logger.warning("bookmark_skipped", reason=str(exc))
                continue
            if bookmark.id is None or bookmark.id not in existing_ids:
                add_bookmark(session, bookmark)
                imported += 1
        return ImportResult(
            success=True,
            message=f"Settings imported successfully. {imported} new bookmarks added.",
        )

    return ImportResult(success=True, message="Settings imported successfully")
