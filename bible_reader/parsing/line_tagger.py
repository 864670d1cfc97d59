from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from bible_reader.core.tag_styles import TagRegistry, TagStyle
from bible_reader.parsing.tokens import Footnote, PlainText, StyledSpan, TaggedLine, Token, VerseMarker

VERSE_TAG = "V"
FOOTNOTE_TAGS = frozenset({"FN", "RF"})

DEFAULT_VERSE_OPEN = "<V>"
DEFAULT_VERSE_CLOSE = "</V>"


@dataclass(frozen=True)
class _Match:
    style: TagStyle
    start: int
    inner_start: int
    inner_end: int
    end: int


def footnote_id(chapter: int | str, verse_number: int, index: int) -> str:
    return f"fn-{chapter}-{verse_number}-{index}"


def _verse_pattern(registry: TagRegistry) -> re.Pattern[str]:
    style = registry.by_name(VERSE_TAG)
    open_tag = style.open_tag if style else DEFAULT_VERSE_OPEN
    close_tag = style.close_tag if style else DEFAULT_VERSE_CLOSE
    return re.compile(re.escape(open_tag) + r"\s*(\d+)\s*" + re.escape(close_tag))


def find_verse_number(line: str, registry: TagRegistry) -> Optional[int]:
    match = _verse_pattern(registry).search(line)
    if not match:
        return None
    return int(match.group(1))


def _next_match(line: str, pos: int, registry: TagRegistry) -> Optional[_Match]:
    best: Optional[_Match] = None
    best_key: tuple[int, int, int] | None = None
    for order, style in enumerate(registry):
        start = line.find(style.open_tag, pos)
        if start == -1:
            continue
        inner_start = start + len(style.open_tag)
        close = line.find(style.close_tag, inner_start)
        if close == -1:
            if not style.ignored:
                continue
            # ignored markers such as <CM> usually stand alone
            match = _Match(style, start, inner_start, inner_start, inner_start)
        else:
            match = _Match(style, start, inner_start, close, close + len(style.close_tag))
        key = (start, -len(style.open_tag), order)
        if best_key is None or key < best_key:
            best, best_key = match, key
    return best


def tag_line(
    line: str,
    registry: TagRegistry,
    chapter: int | str,
    fallback_verse: int,
) -> TaggedLine:
    """Split one raw line into verse, span, footnote and plain text tokens.

    Tags are found by literal delimiter search; the first close delimiter
    after an open delimiter ends the span. An open delimiter without a
    close is left in the plain text.
    """
    explicit = find_verse_number(line, registry)
    verse_number = explicit if explicit is not None else fallback_verse

    tokens: list[Token] = []
    footnote_index = 0
    verse_emitted = False
    matched = False
    pos = 0

    while pos < len(line):
        match = _next_match(line, pos, registry)
        if match is None:
            break
        matched = True
        if match.start > pos:
            tokens.append(PlainText(text=line[pos:match.start]))

        style = match.style
        inner = line[match.inner_start:match.inner_end]
        if style.ignored:
            pass
        elif style.name in FOOTNOTE_TAGS:
            tokens.append(Footnote(id=footnote_id(chapter, verse_number, footnote_index), content=inner))
            footnote_index += 1
        elif style.name == VERSE_TAG and not verse_emitted and inner.strip().isdecimal() and explicit is not None:
            tokens.append(VerseMarker(number=int(inner.strip())))
            verse_emitted = True
        else:
            tokens.append(StyledSpan(tag=style.name, text=inner, css_class=style.css_class))
        pos = match.end

    if not matched:
        tokens = [PlainText(text=line)]
    elif pos < len(line):
        tokens.append(PlainText(text=line[pos:]))

    return TaggedLine(verse_number=verse_number, explicit_verse=explicit is not None, tokens=tokens)


def tag_lines(lines: list[str], registry: TagRegistry, chapter: int | str) -> list[TaggedLine]:
    return [tag_line(line, registry, chapter, index + 1) for index, line in enumerate(lines)]


def strip_tags(line: str, registry: TagRegistry) -> str:
    delimiters = sorted(
        {delimiter for style in registry for delimiter in (style.open_tag, style.close_tag)},
        key=len,
        reverse=True,
    )
    previous = None
    while previous != line:
        previous = line
        for delimiter in delimiters:
            line = line.replace(delimiter, "")
    return line
