import json

from bible_reader import cli
from bible_reader.core.config import reset_settings
from bible_reader.db.session import get_session_factory


def test_cli_upload_and_read(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    reset_settings()
    get_session_factory.cache_clear()
    try:
        version = tmp_path / "kjv.txt"
        version.write_text("<V>1</V>In the beginning<FN>Or, At first</FN>\n<V>2</V>And the earth", encoding="utf-8")
        outline = tmp_path / "outline.json"
        outline.write_text(
            json.dumps({"title": "O", "chapters": [{"book": "Genesis", "number": 1, "startLine": 1, "endLine": 2}]}),
            encoding="utf-8",
        )

        assert cli.main(["init-db"]) == 0
        assert cli.main(["upload-version", "--file", str(version), "--title", "KJV", "--id", "9"]) == 0
        assert cli.main(["upload-outline", "--file", str(outline), "--id", "11"]) == 0
        capsys.readouterr()

        assert cli.main(["footnotes", "--version", "9", "--outline", "11", "--book", "Genesis", "--chapter", "1"]) == 0
        assert "Verse 1: Or, At first" in capsys.readouterr().out

        assert cli.main(["read", "--version", "9", "--outline", "11", "--book", "Genesis", "--chapter", "1"]) == 0
        assert "In the beginning[fn-1-1-0]" in capsys.readouterr().out

        assert cli.main(["read", "--outline", "11", "--book", "Genesis", "--chapter", "1"]) == 2
        assert cli.main(["read", "--version", "9", "--outline", "11", "--book", "Exodus", "--chapter", "1"]) == 1

        assert cli.main(["upload-version", "--file", str(tmp_path / "missing.txt"), "--title", "X"]) == 1
        assert cli.main(["upload-outline", "--file", str(tmp_path / "missing.json")]) == 1

        bad = tmp_path / "bad.json"
        bad.write_text("[]", encoding="utf-8")
        assert cli.main(["upload-outline", "--file", str(bad)]) == 1

        assert cli.main(["resolve", "--version", "9"]) == 0
        assert "/bibles/9.txt" in capsys.readouterr().out
    finally:
        reset_settings()
        get_session_factory.cache_clear()
