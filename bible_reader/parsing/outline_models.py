from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SectionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    start_line: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("start_line", "startLine"),
        serialization_alias="startLine",
    )


class ChapterBoundary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book: Optional[str] = None
    number: int
    name: Optional[str] = None
    start_line: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("start_line", "startLine"),
        serialization_alias="startLine",
    )
    end_line: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("end_line", "endLine"),
        serialization_alias="endLine",
    )
    sections: list[SectionOut] = Field(default_factory=list)

    def matches(self, book: str, number: int | str) -> bool:
        same_book = self.book == book or bool(self.name and self.name.startswith(f"{book} - "))
        return same_book and str(self.number) == str(number)


class OutlineDocument(BaseModel):
    title: str
    description: str = ""
    chapters: list[ChapterBoundary] = Field(default_factory=list)


class ChapterText(BaseModel):
    number: int
    lines: list[str]
