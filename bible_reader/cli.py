# bible_reader/cli.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import uvicorn
from loguru import logger

from bible_reader.content.outcome import ErrorKind, Outcome
from bible_reader.content.resolve import resolve_urls
from bible_reader.content.service import load_chapter, load_chapter_footnotes
from bible_reader.content.uploads import upload_outline_file, upload_version
from bible_reader.core.config import get_settings
from bible_reader.core.exceptions import BibleReaderError
from bible_reader.core.logging import configure_logging
from bible_reader.core.tag_styles import load_tag_registry
from bible_reader.db.kv_store import SessionKeyValueStore
from bible_reader.db.session import get_session_factory, init_db
from bible_reader.parsing.tokens import Footnote, PlainText, StyledSpan, VerseMarker


def _fail(outcome: Outcome) -> int:
    logger.error("{}: {}", outcome.error_kind.value, outcome.error)
    return 2 if outcome.error_kind is ErrorKind.MISSING_IDENTIFIER else 1


def cmd_init_db() -> int:
    init_db()
    logger.info("database ready at {}", get_settings().database_url)
    return 0


def cmd_upload_version(path: str, title: str, language: str | None, description: str | None, version_id: int | None) -> int:
    content = Path(path).read_text(encoding="utf-8")
    with get_session_factory()() as session:
        version = upload_version(session, title, content, language, description, version_id)
        session.commit()
        logger.info("version {} stored ({})", version.id, version.title)
    return 0


def cmd_upload_outline(path: str, outline_id: int | None) -> int:
    with get_session_factory()() as session:
        outline = upload_outline_file(session, Path(path), outline_id)
        session.commit()
        logger.info("outline {} stored with {} chapters", outline.id, len(outline.chapters))
    return 0


def cmd_read(version: str, outline: str, book: str, chapter: int) -> int:
    with get_session_factory()() as session:
        registry = load_tag_registry(SessionKeyValueStore(session))
        outcome = load_chapter(session, version, outline, book, chapter, registry)
    if not outcome.ok:
        return _fail(outcome)

    view = outcome.value
    print(f"{view.name or f'{book} {chapter}'}")
    for line in view.lines:
        parts = []
        for token in line.tokens:
            if isinstance(token, VerseMarker):
                continue
            if isinstance(token, (PlainText, StyledSpan)):
                parts.append(token.text)
            elif isinstance(token, Footnote):
                parts.append(f"[{token.id}]")
        print(f"{line.verse_number:>3} {''.join(parts)}")
    return 0


def cmd_footnotes(version: str, outline: str, book: str, chapter: int) -> int:
    with get_session_factory()() as session:
        registry = load_tag_registry(SessionKeyValueStore(session))
        outcome = load_chapter_footnotes(session, version, outline, book, chapter, registry)
    if not outcome.ok:
        return _fail(outcome)
    if not outcome.value:
        print("No footnotes found for this chapter.")
    for entry in outcome.value:
        print(f"Verse {entry.verse_number}: {entry.content}  ({entry.id})")
    return 0


def cmd_resolve(version: str | None, outline: str | None, strict: bool) -> int:
    outcome = resolve_urls(version, outline, check_catalog=strict)
    if not outcome.ok:
        return _fail(outcome)
    print(json.dumps(outcome.value.model_dump(by_alias=True), indent=2))
    return 0


def cmd_serve(host: str, port: int) -> int:
    from bible_reader.api.main import app as fastapi_app

    uvicorn.run(fastapi_app, host=host, port=port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bible Reader CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db")

    version = sub.add_parser("upload-version")
    version.add_argument("--file", required=True)
    version.add_argument("--title", required=True)
    version.add_argument("--language", default=None)
    version.add_argument("--description", default=None)
    version.add_argument("--id", type=int, default=None)

    outline = sub.add_parser("upload-outline")
    outline.add_argument("--file", required=True)
    outline.add_argument("--id", type=int, default=None)

    for name in ("read", "footnotes"):
        reader = sub.add_parser(name)
        reader.add_argument("--version", default=None)
        reader.add_argument("--outline", default=None)
        reader.add_argument("--book", required=True)
        reader.add_argument("--chapter", type=int, required=True)

    resolve = sub.add_parser("resolve")
    resolve.add_argument("--version", default=None)
    resolve.add_argument("--outline", default=None)
    resolve.add_argument("--strict", action="store_true")

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(get_settings().log_level)
    args = build_parser().parse_args(argv)

    cmds = {
        "init-db": cmd_init_db,
        "upload-version": lambda: cmd_upload_version(args.file, args.title, args.language, args.description, args.id),
        "upload-outline": lambda: cmd_upload_outline(args.file, args.id),
        "read": lambda: cmd_read(args.version, args.outline, args.book, args.chapter),
        "footnotes": lambda: cmd_footnotes(args.version, args.outline, args.book, args.chapter),
        "resolve": lambda: cmd_resolve(args.version, args.outline, args.strict),
        "serve": lambda: cmd_serve(args.host, args.port),
    }
    try:
        return cmds[args.command]()
    except (BibleReaderError, OSError) as exc:
        logger.error("{} failed: {}", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
