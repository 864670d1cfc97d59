from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from bible_reader.core.tag_styles import TagRegistry, load_tag_registry
from bible_reader.db.kv_store import SessionKeyValueStore
from bible_reader.db.session import get_session_factory


def get_db() -> Iterator[Session]:
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def registry_for(db: Session) -> TagRegistry:
    return load_tag_registry(SessionKeyValueStore(db))
