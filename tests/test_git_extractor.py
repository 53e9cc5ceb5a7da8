"""Tests for the git extractor: per-line rows from added diff lines."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from commitscope.config import ExtractionConfig
from commitscope.extractors.git_extractor import (
    GitExtractor,
    _build_line_rows,
    _file_type,
    _indent_depth,
    _wanted,
)

PST = timezone(timedelta(hours=-8))


class FakeModifiedFile:
    def __init__(self, new_path: str | None, diff_added: list | None = None):
        self.new_path = new_path
        self.diff_parsed = {
            "added": diff_added if diff_added is not None else [
                (1, "<html>"),
                (2, "  <body>"),
                (3, "    <main></main>"),
            ],
            "deleted": [],
        }


def fake_commit(files, author_date=None, hash="abc123def"):
    return SimpleNamespace(
        hash=hash,
        author=SimpleNamespace(name="tachi"),
        author_date=author_date or datetime(2024, 2, 4, 12, 24, 31, tzinfo=PST),
        modified_files=files,
    )


class TestHelpers:
    def test_file_type(self):
        assert _file_type("meta/main.JS") == "js"
        assert _file_type("style.css") == "css"
        assert _file_type("Makefile") == "Makefile"

    def test_indent_depth(self):
        assert _indent_depth("plain") == 0
        assert _indent_depth("    two levels") == 2
        assert _indent_depth("\tone tab", indent_unit=4) == 1

    def test_wanted(self):
        config = ExtractionConfig()
        assert _wanted("index.html", config)
        assert _wanted("meta/main.js", config)
        assert not _wanted("node_modules/d3/index.js", config)
        assert not _wanted("images/logo.png", config)


class TestBuildLineRows:
    def test_one_row_per_added_line(self):
        commit = fake_commit([FakeModifiedFile("index.html")])
        rows = _build_line_rows(commit, ExtractionConfig())
        assert [r.line for r in rows] == [1, 2, 3]
        assert [r.depth for r in rows] == [0, 1, 2]
        assert [r.length for r in rows] == [6, 8, 17]
        assert {r.commit for r in rows} == {"abc123def"}
        assert {r.type for r in rows} == {"html"}

    def test_time_fields_use_author_offset(self):
        (row,) = _build_line_rows(
            fake_commit([FakeModifiedFile("a.js", diff_added=[(1, "x")])]),
            ExtractionConfig(),
        )
        assert (row.date, row.time, row.timezone) == ("2024-02-04", "12:24", "-08:00")
        assert row.datetime.utcoffset() == timedelta(hours=-8)
        assert row.author == "tachi"

    def test_naive_date_treated_as_utc(self):
        commit = fake_commit(
            [FakeModifiedFile("a.js", diff_added=[(1, "x")])],
            author_date=datetime(2024, 1, 1, 9, 0),
        )
        (row,) = _build_line_rows(commit, ExtractionConfig())
        assert row.timezone == "+00:00"
        assert row.datetime.tzinfo is not None

    def test_skips_unwanted_and_deleted_files(self):
        commit = fake_commit([
            FakeModifiedFile(None),
            FakeModifiedFile("logo.png"),
            FakeModifiedFile("style.css", diff_added=[(4, "body {}")]),
        ])
        rows = _build_line_rows(commit, ExtractionConfig())
        assert [r.file for r in rows] == ["style.css"]

    def test_empty_commit(self):
        assert _build_line_rows(fake_commit([]), ExtractionConfig()) == []

    def test_file_error_skipped(self):
        """A file that raises during diff parsing shouldn't kill the whole commit."""
        class Exploder:
            new_path = "bad.js"

            @property
            def diff_parsed(self):
                raise RuntimeError("boom")

        commit = fake_commit([Exploder(), FakeModifiedFile("good.js", diff_added=[(1, "ok")])])
        rows = _build_line_rows(commit, ExtractionConfig())
        assert [r.file for r in rows] == ["good.js"]


class TestGitExtractor:
    def test_no_git_dir(self, tmp_path):
        assert GitExtractor(tmp_path).extract() == []

    @patch("commitscope.extractors.git_extractor.Repository")
    def test_traverses_commits(self, mock_repo, tmp_path):
        (tmp_path / ".git").mkdir()
        mock_repo.return_value = MagicMock(traverse_commits=MagicMock(return_value=[
            fake_commit([FakeModifiedFile("index.html")], hash="first"),
            fake_commit([FakeModifiedFile("a.js", diff_added=[(1, "x")])], hash="second"),
        ]))
        rows = GitExtractor(tmp_path).extract()
        assert [r.commit for r in rows] == ["first", "first", "first", "second"]
        mock_repo.assert_called_once_with(str(tmp_path))
