import json

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bible_reader.core.tag_styles import TagStyle, load_tag_styles, save_tag_styles
from bible_reader.db import models
from bible_reader.db.kv_store import SessionKeyValueStore
from bible_reader.library.bookmarks import BookmarkIn, add_bookmark, delete_bookmark, get_bookmarks, update_bookmark
from bible_reader.library.settings_io import (
    export_settings,
    get_display_settings,
    get_last_read,
    import_settings,
    store_display_settings,
    store_last_read,
)


def test_bookmark_crud(session):
    bookmark_id = add_bookmark(
        session,
        BookmarkIn(title="Creation", book="Genesis", chapter=1, notes="start", versionId=9, sections=[{"title": "Day one", "startLine": 1}]),
    )
    saved = get_bookmarks(session)
    assert saved[0].id == bookmark_id
    assert saved[0].version_id == "9"
    assert saved[0].sections[0].start_line == 1

    updated = saved[0].model_copy(update={"notes": "edited"})
    assert update_bookmark(session, updated) is True
    assert get_bookmarks(session)[0].notes == "edited"

    assert delete_bookmark(session, bookmark_id) is True
    assert get_bookmarks(session) == []
    assert update_bookmark(session, updated) is False


def test_export_then_import_into_fresh_store(session, tmp_path):
    store_display_settings(session, {"fontSize": 18, "showFootnotes": True})
    store_last_read(session, {"book": "John", "chapter": 3})
    add_bookmark(session, BookmarkIn(id=7, title="Love", book="John", chapter=3, created_at=123))
    save_tag_styles(SessionKeyValueStore(session), [TagStyle(name="sc", open_tag="<sc>", close_tag="</sc>")])
    session.commit()

    exported = json.loads(export_settings(session))
    assert exported["version"] == 1
    assert exported["displaySettings"]["fontSize"] == 18
    assert exported["bookmarks"][0]["id"] == 7
    assert exported["tagStyles"][0]["name"] == "sc"

    engine = create_engine(f"sqlite:///{tmp_path / 'other.db'}")
    models.Base.metadata.create_all(engine)
    with sessionmaker(bind=engine)() as other:
        result = import_settings(other, json.dumps(exported))
        assert result.success is True
        assert "1 new bookmarks" in result.message
        assert get_display_settings(other) == {"fontSize": 18, "showFootnotes": True}
        assert get_last_read(other) == {"book": "John", "chapter": 3}
        assert [b.id for b in get_bookmarks(other)] == [7]
        assert [s.name for s in load_tag_styles(SessionKeyValueStore(other))] == ["sc"]

        again = import_settings(other, json.dumps(exported))
        assert "0 new bookmarks" in again.message
        assert len(get_bookmarks(other)) == 1


def test_export_without_custom_styles(session):
    exported = json.loads(export_settings(session))
    assert exported["tagStyles"] is None
    assert exported["bookmarks"] == []


def test_import_rejects_garbage(session):
    assert import_settings(session, "{not json").success is False
    result = import_settings(session, json.dumps([1, 2]))
    assert result.success is False
    assert result.message == "Invalid settings data format"
    assert import_settings(session, json.dumps({})).message == "Settings imported successfully"
