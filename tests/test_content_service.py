import json

import pytest

from bible_reader.content.outcome import ErrorKind
from bible_reader.content.service import load_chapter, load_chapter_footnotes, load_marker_chapter
from bible_reader.content.uploads import parse_outline_document, upload_outline, upload_outline_file, upload_version
from bible_reader.core.exceptions import ValidationError
from bible_reader.core.tag_styles import TagRegistry
from bible_reader.parsing.tokens import Footnote, VerseMarker

GENESIS = "\n".join(
    [
        "<V>1</V>In the beginning God created the heaven and the earth.",
        "<V>2</V>And the earth was without form<FN>lit. empty</FN>, and void.<CM>",
        "<V>1</V>Thus the heavens and the earth were finished.",
        "And on the seventh day God ended his work<FN>Or, rested</FN>.",
    ]
)

FLAT_OUTLINE = {
    "title": "Test outline",
    "chapters": [
        {"book": "Genesis", "number": 1, "startLine": 1, "endLine": 2, "sections": [{"title": "Creation", "startLine": 1}]},
        {"name": "Genesis - Chapter 2", "number": 2, "startLine": 3, "endLine": 4},
    ],
}

NESTED_OUTLINE = {
    "title": "Nested",
    "description": "categories layout",
    "categories": [
        {
            "name": "Law",
            "books": [
                {
                    "name": "Genesis",
                    "chapters": [
                        {
                            "chapter": 1,
                            "sections": [
                                {"title": "Creation", "start_line": 1, "end_line": 1},
                                {"title": "Earth", "start_line": 2, "end_line": 2},
                            ],
                        },
                        {"chapter": 2, "start_line": 3, "end_line": 4},
                    ],
                }
            ],
        }
    ],
}


@pytest.fixture
def seeded(session):
    version = upload_version(session, "Test Version", GENESIS, language="English")
    outline = upload_outline(session, FLAT_OUTLINE)
    session.commit()
    return session, str(version.id), str(outline.id)


def test_parse_flat_outline():
    document = parse_outline_document(FLAT_OUTLINE)
    assert document.title == "Test outline"
    assert document.chapters[0].start_line == 1
    assert document.chapters[0].sections[0].title == "Creation"
    assert document.chapters[1].name == "Genesis - Chapter 2"


def test_parse_nested_outline():
    document = parse_outline_document(NESTED_OUTLINE)
    first, second = document.chapters
    assert (first.book, first.number, first.start_line, first.end_line) == ("Genesis", 1, 1, 2)
    assert first.name == "Genesis - Chapter 1"
    assert [s.title for s in first.sections] == ["Creation", "Earth"]
    assert (second.start_line, second.end_line) == (3, 4)


@pytest.mark.parametrize(
    "data",
    [None, [], {"chapters": []}, {"title": "No chapters"}, {"title": "Bad", "chapters": [{"book": "Ruth"}]}],
)
def test_invalid_outline_documents(data):
    with pytest.raises(ValidationError):
        parse_outline_document(data)


@pytest.mark.parametrize(
    "chapters",
    [["not a chapter"], [{"chapter": 1, "sections": "oops"}], [{"chapter": 1, "sections": ["x"]}]],
)
def test_malformed_nested_chapters(chapters):
    data = {"title": "T", "categories": [{"books": [{"name": "Genesis", "chapters": chapters}]}]}
    with pytest.raises(ValidationError):
        parse_outline_document(data)


def test_outline_file_with_bad_json(session, tmp_path):
    path = tmp_path / "outline.json"
    path.write_text("{oops", encoding="utf-8")
    with pytest.raises(ValidationError):
        upload_outline_file(session, path)


def test_outline_file_upload(session, tmp_path):
    path = tmp_path / "outline.json"
    path.write_text(json.dumps(NESTED_OUTLINE), encoding="utf-8")
    outline = upload_outline_file(session, path, outline_id=11)
    assert outline.id == 11
    assert outline.chapters[1]["startLine"] == 3


def test_empty_version_rejected(session):
    with pytest.raises(ValidationError):
        upload_version(session, "Empty", "   \n")
    with pytest.raises(ValidationError):
        upload_version(session, " ", "text")


def test_load_chapter(seeded):
    session, version_id, outline_id = seeded
    outcome = load_chapter(session, version_id, outline_id, "Genesis", 1, TagRegistry.default())
    assert outcome.ok
    view = outcome.value
    assert view.chapter == 1
    assert view.sections[0].title == "Creation"
    assert [line.verse_number for line in view.lines] == [1, 2]
    assert view.lines[0].tokens[0] == VerseMarker(number=1)
    assert view.lines[1].footnotes == [Footnote(id="fn-1-2-0", content="lit. empty")]


def test_load_chapter_by_name_prefix(seeded):
    session, version_id, outline_id = seeded
    outcome = load_chapter(session, version_id, outline_id, "Genesis", 2, TagRegistry.default())
    assert outcome.ok
    assert [line.verse_number for line in outcome.value.lines] == [1, 2]


def test_chapter_footnotes(seeded):
    session, version_id, outline_id = seeded
    outcome = load_chapter_footnotes(session, version_id, outline_id, "Genesis", 2, TagRegistry.default())
    assert outcome.ok
    assert [(e.id, e.verse_number, e.content) for e in outcome.value] == [("fn-2-2-0", 2, "Or, rested")]


def test_lookup_errors(seeded):
    session, version_id, outline_id = seeded
    registry = TagRegistry.default()

    missing = load_chapter_footnotes(session, None, outline_id, "Genesis", 1, registry)
    assert missing.error_kind is ErrorKind.MISSING_IDENTIFIER
    assert missing.error == "Missing version or outline ID"

    assert load_chapter(session, "999", outline_id, "Genesis", 1, registry).error_kind is ErrorKind.NOT_FOUND
    assert load_chapter(session, version_id, "abc", "Genesis", 1, registry).error_kind is ErrorKind.NOT_FOUND

    no_chapter = load_chapter(session, version_id, outline_id, "Exodus", 1, registry)
    assert no_chapter.error_kind is ErrorKind.NOT_FOUND
    assert no_chapter.error == "Chapter not found in outline"


def test_load_chapter_by_marker(seeded):
    session, version_id, _ = seeded
    registry = TagRegistry.default()

    outcome = load_marker_chapter(session, version_id, 2, registry)
    assert outcome.ok
    assert outcome.value.book is None
    assert [line.verse_number for line in outcome.value.lines] == [1, 2]
    assert outcome.value.lines[1].footnotes == [Footnote(id="fn-2-2-0", content="Or, rested")]

    assert load_marker_chapter(session, None, 1, registry).error_kind is ErrorKind.MISSING_IDENTIFIER
    assert load_marker_chapter(session, version_id, 3, registry).error == "Chapter not found in version"
