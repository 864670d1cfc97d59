from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Token(BaseModel):
    model_config = ConfigDict(frozen=True)


class VerseMarker(_Token):
    kind: Literal["verse"] = "verse"
    number: int


class StyledSpan(_Token):
    kind: Literal["span"] = "span"
    tag: str
    text: str
    css_class: str = Field(default="", serialization_alias="cssClass")


class Footnote(_Token):
    kind: Literal["footnote"] = "footnote"
    id: str
    content: str


class PlainText(_Token):
    kind: Literal["text"] = "text"
    text: str


Token = Annotated[Union[VerseMarker, StyledSpan, Footnote, PlainText], Field(discriminator="kind")]


class TaggedLine(BaseModel):
    verse_number: int = Field(serialization_alias="verseNumber")
    explicit_verse: bool = Field(serialization_alias="explicitVerse")
    tokens: list[Token]

    @property
    def footnotes(self) -> list[Footnote]:
        return [token for token in self.tokens if isinstance(token, Footnote)]

    @property
    def text(self) -> str:
        """Reading text of the line: plain runs and span contents, no markers."""
        parts = []
        for token in self.tokens:
            if isinstance(token, PlainText):
                parts.append(token.text)
            elif isinstance(token, StyledSpan):
                parts.append(token.text)
        return "".join(parts)


class FootnoteEntry(BaseModel):
    id: str
    verse_number: int = Field(serialization_alias="verseNumber")
    content: str
