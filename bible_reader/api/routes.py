from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from bible_reader.api.deps import get_db, registry_for
from bible_reader.api.schemas import (
    HistoryIn,
    OutlineOut,
    PlanArchiveIn,
    PlanChaptersIn,
    PlanCompletionIn,
    PlanIn,
    VersionOut,
)
from bible_reader.content.catalog import DEFAULT_OUTLINES, DEFAULT_VERSIONS
from bible_reader.content.outcome import ErrorKind, Outcome
from bible_reader.content.resolve import resolve_urls
from bible_reader.content.service import (
    list_marker_chapters,
    load_chapter,
    load_chapter_footnotes,
    load_marker_chapter,
)
from bible_reader.core.tag_styles import dump_tag_styles, reset_tag_styles, save_tag_styles, validate_tag_styles
from bible_reader.db import repo
from bible_reader.db.kv_store import SessionKeyValueStore
from bible_reader.library.bookmarks import BookmarkIn, add_bookmark, delete_bookmark, get_bookmarks, update_bookmark
from bible_reader.library.history import (
    add_history_item,
    clear_history,
    delete_history_item,
    get_history,
    get_most_recent,
)
from bible_reader.library.reading_plan import (
    ReadingPlan,
    add_chapters_to_plan,
    calculate_plan_progress,
    create_reading_plan,
    delete_reading_plan,
    get_all_reading_plans,
    get_next_chapter_to_read,
    get_reading_plan,
    mark_chapter_completed,
    store_reading_plan,
    toggle_plan_archived,
)
from bible_reader.library.settings_io import export_settings, import_settings

router = APIRouter()

STATUS_BY_KIND = {
    ErrorKind.MISSING_IDENTIFIER: 400,
    ErrorKind.NOT_FOUND: 404,
}


def _error_response(outcome: Outcome) -> JSONResponse:
    return JSONResponse({"error": outcome.error}, status_code=STATUS_BY_KIND[outcome.error_kind])


def _not_found(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=404)


@router.get("/health")
def health(db: Session = Depends(get_db)):
    db_ok = True
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        db_ok = False
    return {"status": "ok" if db_ok else "degraded", "db_ok": db_ok}


@router.get("/resolve-urls")
def resolve_urls_endpoint(version: Optional[str] = None, outline: Optional[str] = None, strict: bool = False):
    outcome = resolve_urls(version, outline, check_catalog=strict)
    if not outcome.ok:
        return _error_response(outcome)
    return outcome.value.model_dump(by_alias=True)


@router.get("/catalog")
def catalog():
    return {
        "versions": [asdict(v) for v in DEFAULT_VERSIONS],
        "outlines": [asdict(o) for o in DEFAULT_OUTLINES],
    }


@router.get("/versions", response_model=list[VersionOut])
def list_versions(db: Session = Depends(get_db)):
    return [VersionOut.model_validate(v) for v in repo.list_versions(db)]


@router.get("/outlines", response_model=list[OutlineOut])
def list_outlines(db: Session = Depends(get_db)):
    return [OutlineOut.model_validate(o) for o in repo.list_outlines(db)]


@router.get("/versions/{version_id}/chapters")
def version_chapters(version_id: str, db: Session = Depends(get_db)):
    outcome = list_marker_chapters(db, version_id)
    if not outcome.ok:
        return _error_response(outcome)
    return {"chapters": [{"number": c.number, "lineCount": len(c.lines)} for c in outcome.value]}


@router.get("/versions/{version_id}/chapters/{chapter}")
def read_version_chapter(version_id: str, chapter: int, db: Session = Depends(get_db)):
    outcome = load_marker_chapter(db, version_id, chapter, registry_for(db))
    if not outcome.ok:
        return _error_response(outcome)
    return outcome.value.model_dump(by_alias=True)


@router.get("/read/{book}/{chapter}")
def read_chapter(
    book: str,
    chapter: int,
    version: Optional[str] = None,
    outline: Optional[str] = None,
    db: Session = Depends(get_db),
):
    outcome = load_chapter(db, version, outline, book, chapter, registry_for(db))
    if not outcome.ok:
        return _error_response(outcome)
    return outcome.value.model_dump(by_alias=True)


@router.get("/footnotes/{book}/{chapter}")
def chapter_footnotes(
    book: str,
    chapter: int,
    version: Optional[str] = None,
    outline: Optional[str] = None,
    db: Session = Depends(get_db),
):
    outcome = load_chapter_footnotes(db, version, outline, book, chapter, registry_for(db))
    if not outcome.ok:
        return _error_response(outcome)
    return {"footnotes": [entry.model_dump(by_alias=True) for entry in outcome.value]}


@router.get("/tag-styles")
def get_tag_styles(db: Session = Depends(get_db)):
    return {"styles": dump_tag_styles(registry_for(db))}


@router.put("/tag-styles")
def put_tag_styles(payload: list[dict[str, Any]] = Body(...), db: Session = Depends(get_db)):
    styles = validate_tag_styles(payload)
    if not styles:
        return JSONResponse({"error": "No valid tag styles supplied"}, status_code=422)
    save_tag_styles(SessionKeyValueStore(db), styles)
    db.commit()
    return {"styles": dump_tag_styles(styles), "dropped": len(payload) - len(styles)}


@router.delete("/tag-styles")
def delete_tag_styles(db: Session = Depends(get_db)):
    reset_tag_styles(SessionKeyValueStore(db))
    db.commit()
    return {"styles": dump_tag_styles(registry_for(db))}


@router.get("/history")
def history(db: Session = Depends(get_db)):
    return {"items": [item.model_dump(by_alias=True) for item in get_history(db)]}


@router.post("/history")
def add_history(payload: HistoryIn, db: Session = Depends(get_db)):
    item_id = add_history_item(db, payload.book, payload.chapter, payload.version_id, payload.outline_id)
    db.commit()
    return {"id": item_id}


@router.delete("/history")
def delete_history(db: Session = Depends(get_db)):
    clear_history(db)
    db.commit()
    return {"cleared": True}


@router.get("/history/recent")
def recent_history(db: Session = Depends(get_db)):
    item = get_most_recent(db)
    return {"item": item.model_dump(by_alias=True) if item else None}


@router.delete("/history/{item_id}")
def delete_history_entry(item_id: int, db: Session = Depends(get_db)):
    if not delete_history_item(db, item_id):
        return _not_found(f"History item {item_id} not found")
    db.commit()
    return {"deleted": True}


@router.get("/settings/export")
def settings_export(db: Session = Depends(get_db)):
    return PlainTextResponse(export_settings(db), media_type="application/json")


@router.post("/settings/import")
def settings_import(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    result = import_settings(db, json.dumps(payload))
    if result.success:
        db.commit()
    else:
        db.rollback()
    return JSONResponse(result.model_dump(), status_code=200 if result.success else 400)


@router.get("/bookmarks")
def bookmarks(db: Session = Depends(get_db)):
    return {"bookmarks": [b.model_dump(by_alias=True) for b in get_bookmarks(db)]}


@router.post("/bookmarks")
def create_bookmark(payload: BookmarkIn, db: Session = Depends(get_db)):
    bookmark_id = add_bookmark(db, payload)
    db.commit()
    return {"id": bookmark_id}


@router.put("/bookmarks/{bookmark_id}")
def edit_bookmark(bookmark_id: int, payload: BookmarkIn, db: Session = Depends(get_db)):
    if not update_bookmark(db, payload.model_copy(update={"id": bookmark_id})):
        return _not_found(f"Bookmark {bookmark_id} not found")
    db.commit()
    return {"updated": True}


@router.delete("/bookmarks/{bookmark_id}")
def remove_bookmark(bookmark_id: int, db: Session = Depends(get_db)):
    if not delete_bookmark(db, bookmark_id):
        return _not_found(f"Bookmark {bookmark_id} not found")
    db.commit()
    return {"deleted": True}


def _plan_view(plan: ReadingPlan) -> dict[str, Any]:
    data = plan.model_dump(by_alias=True)
    data["progress"] = calculate_plan_progress(plan).model_dump(by_alias=True)
    data["nextChapterIndex"] = get_next_chapter_to_read(plan)
    return data


def _save_plan(db: Session, plan: ReadingPlan) -> dict[str, Any]:
    store_reading_plan(db, plan)
    db.commit()
    return _plan_view(plan)


@router.get("/reading-plans")
def reading_plans(include_archived: bool = True, db: Session = Depends(get_db)):
    return {"plans": [_plan_view(p) for p in get_all_reading_plans(db, include_archived)]}


@router.post("/reading-plans")
def create_plan(payload: PlanIn, db: Session = Depends(get_db)):
    return _save_plan(db, create_reading_plan(payload.name, payload.description))


@router.get("/reading-plans/{plan_id}")
def reading_plan(plan_id: str, db: Session = Depends(get_db)):
    plan = get_reading_plan(db, plan_id)
    if plan is None:
        return _not_found(f"Reading plan {plan_id} not found")
    return _plan_view(plan)


@router.delete("/reading-plans/{plan_id}")
def remove_plan(plan_id: str, db: Session = Depends(get_db)):
    if not delete_reading_plan(db, plan_id):
        return _not_found(f"Reading plan {plan_id} not found")
    db.commit()
    return {"deleted": True}


@router.post("/reading-plans/{plan_id}/chapters")
def add_plan_chapters(plan_id: str, payload: PlanChaptersIn, db: Session = Depends(get_db)):
    plan = get_reading_plan(db, plan_id)
    if plan is None:
        return _not_found(f"Reading plan {plan_id} not found")
    return _save_plan(db, add_chapters_to_plan(plan, payload.book, payload.start_chapter, payload.count))


@router.put("/reading-plans/{plan_id}/chapters/{index}")
def complete_plan_chapter(plan_id: str, index: int, payload: PlanCompletionIn, db: Session = Depends(get_db)):
    plan = get_reading_plan(db, plan_id)
    if plan is None:
        return _not_found(f"Reading plan {plan_id} not found")
    try:
        updated = mark_chapter_completed(plan, index, payload.completed)
    except IndexError as exc:
        return _not_found(str(exc))
    return _save_plan(db, updated)


@router.put("/reading-plans/{plan_id}/archived")
def archive_plan(plan_id: str, payload: PlanArchiveIn, db: Session = Depends(get_db)):
    plan = get_reading_plan(db, plan_id)
    if plan is None:
        return _not_found(f"Reading plan {plan_id} not found")
    return _save_plan(db, toggle_plan_archived(plan, payload.archived))
