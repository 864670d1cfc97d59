from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Protocol

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from bible_reader.core.exceptions import StorageError

logger = structlog.get_logger()

TAG_STYLES_KEY = "bibleReaderTagStyles"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class TagStyle(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    open_tag: str = Field(min_length=1, validation_alias=AliasChoices("open_tag", "openTag"))
    close_tag: str = Field(min_length=1, validation_alias=AliasChoices("close_tag", "closeTag"))
    description: str = ""
    css_class: str = Field("", validation_alias=AliasChoices("css_class", "cssClass"))
    ignored: bool = False


def _style(name: str, open_tag: str, close_tag: str, description: str, css_class: str, ignored: bool = False) -> TagStyle:
    return TagStyle(
        name=name,
        open_tag=open_tag,
        close_tag=close_tag,
        description=description,
        css_class=css_class,
        ignored=ignored,
    )


# RF/Rf use the two-character reference convention: <RF>note<Rf> ... </RF>
DEFAULT_TAG_STYLES: tuple[TagStyle, ...] = (
    _style("b", "<b>", "</b>", "Bold text", "font-bold"),
    _style("i", "<i>", "</i>", "Italic text", "italic"),
    _style("u", "<u>", "</u>", "Underlined text", "underline"),
    _style("FN", "<FN>", "</FN>", "Footnote", "text-blue-500"),
    _style("RF", "<RF>", "<Rf>", "Reference footnote start", "text-blue-500"),
    _style("Rf", "<Rf>", "</RF>", "Reference footnote end", "text-blue-500"),
    _style("CM", "<CM>", "</CM>", "Chapter marker", "", ignored=True),
    _style("V", "<V>", "</V>", "Verse number", "font-bold text-sm mr-2"),
    _style("CI", "<CI>", "</CI>", "Content indentation", ""),
    _style("PI1", "<PI1>", "</PI1>", "Paragraph indentation level 1", "ml-6 inline-block"),
)


@dataclass(frozen=True)
class TagRegistry:
    styles: tuple[TagStyle, ...]

    @classmethod
    def default(cls) -> "TagRegistry":
        return cls(DEFAULT_TAG_STYLES)

    @classmethod
    def from_styles(cls, styles: Iterable[TagStyle]) -> "TagRegistry":
        unique: list[TagStyle] = []
        seen: set[str] = set()
        for style in styles:
            if style.name in seen:
                continue
            seen.add(style.name)
            unique.append(style)
        return cls(tuple(unique))

    def __iter__(self) -> Iterator[TagStyle]:
        return iter(self.styles)

    def __len__(self) -> int:
        return len(self.styles)

    def by_name(self, name: str) -> Optional[TagStyle]:
        for style in self.styles:
            if style.name == name:
                return style
        return None

    def by_open_tag(self, open_tag: str) -> Optional[TagStyle]:
        for style in self.styles:
            if style.open_tag == open_tag:
                return style
        return None


def validate_tag_styles(raw: Any) -> list[TagStyle]:
    """Keep the entries of a raw JSON array that pass the TagStyle schema.

    Anything that is not a list yields an empty result; entries with a
    duplicate name are dropped after the first occurrence.
    """
    if not isinstance(raw, list):
        return []
    styles: list[TagStyle] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            logger.warning("tag_style_dropped", index=index, reason="not an object")
            continue
        try:
            styles.append(TagStyle.model_validate(entry))
        except PydanticValidationError as exc:
            logger.warning("tag_style_dropped", index=index, reason=str(exc))
    return list(TagRegistry.from_styles(styles))


def load_tag_styles(store: Optional[KeyValueStore]) -> list[TagStyle]:
    if store is None:
        return list(DEFAULT_TAG_STYLES)

    try:
        saved = store.get(TAG_STYLES_KEY)
    except StorageError as exc:
        logger.warning("tag_styles_unavailable", error=str(exc))
        return list(DEFAULT_TAG_STYLES)
    if not saved:
        return list(DEFAULT_TAG_STYLES)

    try:
        parsed = json.loads(saved)
    except (TypeError, ValueError) as exc:
        logger.warning("tag_styles_unreadable", error=str(exc))
        return list(DEFAULT_TAG_STYLES)

    styles = validate_tag_styles(parsed)
    if not styles:
        return list(DEFAULT_TAG_STYLES)
    return styles


def load_tag_registry(store: Optional[KeyValueStore]) -> TagRegistry:
    return TagRegistry.from_styles(load_tag_styles(store))


def dump_tag_styles(styles: Iterable[TagStyle]) -> list[dict[str, Any]]:
    return [style.model_dump() for style in styles]


def save_tag_styles(store: KeyValueStore, styles: Iterable[TagStyle]) -> None:
    store.set(TAG_STYLES_KEY, json.dumps(dump_tag_styles(styles)))


def reset_tag_styles(store: KeyValueStore) -> None:
    store.delete(TAG_STYLES_KEY)
