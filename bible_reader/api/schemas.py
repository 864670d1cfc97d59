from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class VersionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    language: Optional[str] = None
    description: Optional[str] = None


class OutlineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None


class HistoryIn(BaseModel):
    book: str
    chapter: int
    version_id: Optional[str] = None
    outline_id: Optional[str] = None


class PlanIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class PlanChaptersIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book: str
    start_chapter: int = Field(1, ge=1, validation_alias=AliasChoices("start_chapter", "startChapter"))
    count: int = Field(1, ge=1)


class PlanCompletionIn(BaseModel):
    completed: bool = True


class PlanArchiveIn(BaseModel):
    archived: bool
