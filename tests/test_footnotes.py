from bible_reader.core.tag_styles import TagRegistry
from bible_reader.parsing.footnotes import extract_chapter_footnotes


def test_chapter_footnote_list():
    lines = [
        "<V>1</V>In the beginning<FN>Or, At first</FN>",
        "no footnote here",
        "unnumbered line<FN>a</FN> and<FN>b</FN>",
        "<V>4</V>paired<RF>see 1:1<Rf>",
    ]
    entries = extract_chapter_footnotes(lines, 1, TagRegistry.default())
    assert [(e.id, e.verse_number, e.content) for e in entries] == [
        ("fn-1-1-0", 1, "Or, At first"),
        ("fn-1-3-0", 3, "a"),
        ("fn-1-3-1", 3, "b"),
        ("fn-1-4-0", 4, "see 1:1"),
    ]
    assert entries[0].model_dump(by_alias=True) == {"id": "fn-1-1-0", "verseNumber": 1, "content": "Or, At first"}


def test_no_footnotes():
    assert extract_chapter_footnotes(["plain", "<V>2</V>text"], 5, TagRegistry.default()) == []
