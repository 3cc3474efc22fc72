"""Tests for the command-line interface."""

import json
import pytest
from pathlib import Path

from subtitle_review import cli as cli_module
from subtitle_review.cli import collect_article_paths, main, parse_arguments, run
from subtitle_review.document import ArticleLoadError


@pytest.fixture
def subs(tmp_path, write_article):
    write_article(tmp_path / "subs" / "one.json")
    write_article(tmp_path / "subs" / "deeper" / "two.json", reviewState="completed")
    (tmp_path / "subs" / "notes.txt").write_text("ignore me")
    return tmp_path / "subs"


def cli(tmp_path, *argv):
    args = parse_arguments([
        "--typos-file", str(tmp_path / "typos.json"),
        "--state-file", str(tmp_path / "state.json"),
        *argv,
    ])
    return run(args)


class TestCollectPaths:

    def test_expands_folders(self, subs):
        paths = collect_article_paths([str(subs)])
        assert [p.name for p in paths] == ["two.json", "one.json"]

    def test_keeps_files(self, subs):
        paths = collect_article_paths([str(subs / "one.json")])
        assert paths == [(subs / "one.json").resolve()]


class TestCommands:

    def test_tree(self, tmp_path, subs, capsys):
        assert cli(tmp_path, "tree", str(subs)) == 0
        out = capsys.readouterr().out
        assert "deeper/" in out
        assert "[x] two.json" in out
        assert "[ ] one.json" in out
        assert "notes.txt" not in out

    def test_validate_clean(self, tmp_path, subs):
        assert cli(tmp_path, "validate", str(subs)) == 0

    def test_validate_errors(self, tmp_path, write_article, capsys):
        path = write_article(tmp_path / "bad.json", content=[{"timestample": "1:00", "text": ""}])
        assert cli(tmp_path, "validate", str(path)) == 1
        out = capsys.readouterr().out
        assert "ERROR" in out
        assert "not a valid timestamp" in out

    def test_validate_unloadable(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops")
        assert cli(tmp_path, "validate", str(path)) == 1

    def test_typos_roundtrip(self, tmp_path, capsys):
        assert cli(tmp_path, "typos", "add", "teh", "the") == 0
        assert cli(tmp_path, "typos", "list") == 0
        assert "teh -> the" in capsys.readouterr().out

        assert cli(tmp_path, "typos", "remove", "teh") == 0
        assert cli(tmp_path, "typos", "remove", "teh") == 1

        cli(tmp_path, "typos", "add", "a", "b")
        assert cli(tmp_path, "typos", "reset") == 0
        assert json.loads((tmp_path / "typos.json").read_text()) == []

    def test_typos_add_blank(self, tmp_path):
        assert cli(tmp_path, "typos", "add", " ", "the") == 1

    def test_fix_typos(self, tmp_path, subs):
        cli(tmp_path, "typos", "add", "teh", "the")
        assert cli(tmp_path, "fix-typos", str(subs)) == 0

        data = json.loads((subs / "one.json").read_text(encoding="utf-8"))
        assert data["content"][0]["text"] == "Hello the world"
        assert data["content"][2]["text"] == "the end"

    def test_fix_typos_continues_after_save_failure(self, tmp_path, subs, monkeypatch):
        cli(tmp_path, "typos", "add", "teh", "the")
        real_save = cli_module.save_article

        def failing_save(article, path):
            if path.name == "two.json":
                raise ArticleLoadError("Save failed: read-only")
            real_save(article, path)

        monkeypatch.setattr(cli_module, "save_article", failing_save)
        assert cli(tmp_path, "fix-typos", str(subs)) == 1

        data = json.loads((subs / "one.json").read_text(encoding="utf-8"))
        assert data["content"][0]["text"] == "Hello the world"

    def test_fix_typos_dry_run(self, tmp_path, subs):
        cli(tmp_path, "typos", "add", "teh", "the")
        before = (subs / "one.json").read_text(encoding="utf-8")
        assert cli(tmp_path, "fix-typos", "--dry-run", str(subs)) == 0
        assert (subs / "one.json").read_text(encoding="utf-8") == before

    def test_status_show_and_set(self, tmp_path, subs, capsys):
        target = subs / "one.json"
        assert cli(tmp_path, "status", str(target)) == 0
        assert "Not started" in capsys.readouterr().out

        assert cli(tmp_path, "status", str(target), "completed") == 0
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["reviewState"] == "completed"
        assert "reviewedAt" in data

    def test_status_set_not_started_prints_saved_state(self, tmp_path, subs, capsys):
        target = subs / "deeper" / "two.json"
        assert cli(tmp_path, "status", str(target), "notStarted") == 0

        assert json.loads(target.read_text(encoding="utf-8"))["reviewState"] == "notStarted"
        out = capsys.readouterr().out
        assert "[ ] Not started" in out
        assert "In progress" not in out

    def test_status_missing_file(self, tmp_path, subs):
        assert cli(tmp_path, "status", str(subs / "nope.json")) == 1

    def test_search(self, tmp_path, subs, capsys):
        assert cli(tmp_path, "search", str(subs / "one.json"), "TEH") == 0
        out = capsys.readouterr().out
        assert "Hello teh world" in out
        assert "Second line" not in out

    def test_search_missing(self, tmp_path, write_article, capsys):
        path = write_article(tmp_path / "gaps.json", content=[
            {"timestample": "00:00:01", "text": " "},
            {"timestample": "00:00:02", "text": "filled"},
        ])
        assert cli(tmp_path, "search", str(path), "--missing") == 0
        out = capsys.readouterr().out
        assert "00:00:01" in out
        assert "filled" not in out

    def test_video(self, tmp_path, subs, capsys):
        videos = tmp_path / "videos"
        videos.mkdir()
        (videos / "ONE.mp4").write_bytes(b"")

        assert cli(tmp_path, "video", str(subs / "one.json"), "--video-root", str(videos), "--at", "00:01:30") == 0
        out = capsys.readouterr().out
        assert "ONE.mp4" in out
        assert "seek 90s" in out

    def test_video_not_found(self, tmp_path, subs):
        videos = tmp_path / "videos"
        videos.mkdir()
        assert cli(tmp_path, "video", str(subs / "one.json"), "--video-root", str(videos)) == 1

    def test_main_exit_code(self, tmp_path, subs):
        with pytest.raises(SystemExit) as exc:
            main([
                "--typos-file", str(tmp_path / "typos.json"),
                "--state-file", str(tmp_path / "state.json"),
                "validate", str(subs),
            ])
        assert exc.value.code == 0
