from __future__ import annotations

from bible_reader.core.tag_styles import TagRegistry
from bible_reader.parsing.line_tagger import tag_lines
from bible_reader.parsing.tokens import FootnoteEntry


def extract_chapter_footnotes(lines: list[str], chapter: int | str, registry: TagRegistry) -> list[FootnoteEntry]:
    # ids restart per line, so a verse spread over two lines can repeat an id
    entries: list[FootnoteEntry] = []
    for tagged in tag_lines(lines, registry, chapter):
        for footnote in tagged.footnotes:
            entries.append(
                FootnoteEntry(id=footnote.id, verse_number=tagged.verse_number, content=footnote.content)
            )
    return entries
