from __future__ import annotations

import secrets
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from bible_reader.db import models
from bible_reader.library.history import now_ms


class PlanChapter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book: str
    chapter: int
    completed: bool = False
    last_read: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("last_read", "lastRead"), serialization_alias="lastRead"
    )


class ReadingPlan(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    created_at: float = Field(validation_alias=AliasChoices("created_at", "createdAt"), serialization_alias="createdAt")
    updated_at: float = Field(validation_alias=AliasChoices("updated_at", "updatedAt"), serialization_alias="updatedAt")
    chapters: list[PlanChapter] = Field(default_factory=list)
    current_index: int = Field(
        default=0, validation_alias=AliasChoices("current_index", "currentIndex"), serialization_alias="currentIndex"
    )
    archived: bool = False


class PlanProgress(BaseModel):
    completed_chapters: int = Field(serialization_alias="completedChapters")
    total_chapters: int = Field(serialization_alias="totalChapters")
    percent_complete: float = Field(serialization_alias="percentComplete")


def create_reading_plan(name: str, description: Optional[str] = None) -> ReadingPlan:
    stamp = now_ms()
    return ReadingPlan(
        id=f"plan_{int(stamp)}_{secrets.token_hex(4)}",
        name=name,
        description=description,
        created_at=stamp,
        updated_at=stamp,
    )


def _has_chapter(plan: ReadingPlan, book: str, chapter: int) -> bool:
    return any(c.book == book and c.chapter == chapter for c in plan.chapters)


def add_chapter_to_plan(plan: ReadingPlan, book: str, chapter: int) -> ReadingPlan:
    if _has_chapter(plan, book, chapter):
        return plan
    return plan.model_copy(
        update={
            "chapters": [*plan.chapters, PlanChapter(book=book, chapter=chapter)],
            "updated_at": now_ms(),
        }
    )


def add_chapters_to_plan(plan: ReadingPlan, book: str, start_chapter: int, count: int) -> ReadingPlan:
    chapters = list(plan.chapters)
    for offset in range(count):
        number = start_chapter + offset
        if not any(c.book == book and c.chapter == number for c in chapters):
            chapters.append(PlanChapter(book=book, chapter=number))
    return plan.model_copy(update={"chapters": chapters, "updated_at": now_ms()})


def add_book_to_plan(plan: ReadingPlan, book: str, chapter_count: int) -> ReadingPlan:
    return add_chapters_to_plan(plan, book, 1, chapter_count)


def mark_chapter_completed(plan: ReadingPlan, chapter_index: int, completed: bool) -> ReadingPlan:
    if not 0 <= chapter_index < len(plan.chapters):
        raise IndexError(f"chapter index {chapter_index} out of range")
    chapters = list(plan.chapters)
    target = chapters[chapter_index]
    chapters[chapter_index] = target.model_copy(
        update={"completed": completed, "last_read": now_ms() if completed else target.last_read}
    )
    return plan.model_copy(update={"chapters": chapters, "updated_at": now_ms()})


def toggle_plan_archived(plan: ReadingPlan, archived: bool) -> ReadingPlan:
    return plan.model_copy(update={"archived": archived, "updated_at": now_ms()})


def get_next_chapter_to_read(plan: ReadingPlan) -> Optional[int]:
    for index, chapter in enumerate(plan.chapters):
        if not chapter.completed:
            return index
    return None


def calculate_plan_progress(plan: ReadingPlan) -> PlanProgress:
    total = len(plan.chapters)
    completed = sum(1 for c in plan.chapters if c.completed)
    percent = (completed / total) * 100 if total else 0.0
    return PlanProgress(completed_chapters=completed, total_chapters=total, percent_complete=percent)


def get_unique_books_in_plan(plan: ReadingPlan) -> list[str]:
    return sorted({c.book for c in plan.chapters})


def get_chapters_for_book_in_plan(plan: ReadingPlan, book: str) -> list[PlanChapter]:
    return sorted((c for c in plan.chapters if c.book == book), key=lambda c: c.chapter)


# persistence


def store_reading_plan(session: Session, plan: ReadingPlan) -> None:
    payload = plan.model_dump()
    existing = session.get(models.ReadingPlanRecord, plan.id)
    if existing:
        existing.name = plan.name
        existing.archived = plan.archived
        existing.updated_at = plan.updated_at
        existing.payload = payload
    else:
        session.add(
            models.ReadingPlanRecord(
                id=plan.id,
                name=plan.name,
                archived=plan.archived,
                updated_at=plan.updated_at,
                payload=payload,
            )
        )
    session.flush()


def get_reading_plan(session: Session, plan_id: str) -> Optional[ReadingPlan]:
    record = session.get(models.ReadingPlanRecord, plan_id)
    return ReadingPlan.model_validate(record.payload) if record else None


def get_all_reading_plans(session: Session, include_archived: bool = True) -> list[ReadingPlan]:
    query = select(models.ReadingPlanRecord).order_by(models.ReadingPlanRecord.updated_at.desc())
    if not include_archived:
        query = query.where(models.ReadingPlanRecord.archived.is_(False))
    return [ReadingPlan.model_validate(record.payload) for record in session.execute(query).scalars()]


def delete_reading_plan(session: Session, plan_id: str) -> bool:
    record = session.get(models.ReadingPlanRecord, plan_id)
    if record is None:
        return False
    session.delete(record)
    session.flush()
    return True
