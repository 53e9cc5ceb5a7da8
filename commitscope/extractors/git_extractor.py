"""Extract per-line change rows from git commit history using PyDriller."""

import fnmatch
import logging
import signal
from datetime import timezone
from pathlib import Path, PurePosixPath

from pydriller import Repository

from commitscope.config import ExtractionConfig
from commitscope.extractors.base import BaseExtractor
from commitscope.models import LineChange

logger = logging.getLogger(__name__)


class _RepoTimeout(Exception):
    pass


def _timeout_handler(signum: int, frame: object) -> None:
    raise _RepoTimeout("Repository extraction timed out")


def _file_type(path: str) -> str:
    """Category label for a path: its extension, or the file name if it has none."""
    p = PurePosixPath(path)
    return p.suffix.lstrip(".").lower() or p.name


def _indent_depth(text: str, indent_unit: int = 2) -> int:
    expanded = text.expandtabs(4)
    leading = len(expanded) - len(expanded.lstrip(" "))
    return leading // max(indent_unit, 1)


def _wanted(path: str, config: ExtractionConfig) -> bool:
    parts = PurePosixPath(path).parts
    if any(part in config.exclude_dirs for part in parts[:-1]):
        return False
    return any(fnmatch.fnmatch(parts[-1], pat) for pat in config.include_patterns)


def _build_line_rows(
    commit: object,
    config: ExtractionConfig,
) -> list[LineChange]:
    """Build one LineChange per added line of a commit.

    Per-file errors are logged and skipped; the rest of the commit is kept.
    """
    ts = commit.author_date  # type: ignore[attr-defined]
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    offset = ts.strftime("%z")
    tz = f"{offset[:3]}:{offset[3:]}" if offset else "+00:00"

    rows: list[LineChange] = []
    for mf in commit.modified_files:  # type: ignore[attr-defined]
        try:
            filepath = mf.new_path
            if not filepath or not _wanted(filepath, config):
                continue
            added = (mf.diff_parsed or {}).get("added", [])
            for entry in added:
                if not isinstance(entry, tuple) or len(entry) < 2:
                    continue
                lineno, text = entry[0], entry[1].rstrip("\n")
                rows.append(LineChange(
                    commit=commit.hash,  # type: ignore[attr-defined]
                    file=filepath,
                    type=_file_type(filepath),
                    line=lineno,
                    depth=_indent_depth(text, config.indent_unit),
                    length=len(text),
                    author=commit.author.name,  # type: ignore[attr-defined]
                    date=ts.strftime("%Y-%m-%d"),
                    time=ts.strftime("%H:%M"),
                    timezone=tz,
                    datetime=ts,
                ))
        except _RepoTimeout:
            raise
        except Exception:
            logger.debug(
                "Skipping lines for file in commit (file-level error)",
                exc_info=True,
            )

    return rows


class GitExtractor(BaseExtractor):
    """Extract added-line rows from a git repository, oldest commit first."""

    def __init__(self, source_path: Path, config: ExtractionConfig | None = None) -> None:
        super().__init__(source_path)
        self.config = config or ExtractionConfig()

    def extract(self) -> list[LineChange]:
        git_dir = self.source_path / ".git"
        if not git_dir.exists():
            logger.warning("No .git directory found at %s", self.source_path)
            return []

        rows: list[LineChange] = []
        commits_seen = 0
        old_handler = signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(self.config.timeout_seconds)
        try:
            for commit in Repository(str(self.source_path)).traverse_commits():
                try:
                    rows.extend(_build_line_rows(commit, self.config))
                except _RepoTimeout:
                    raise
                except Exception:
                    logger.warning(
                        "Could not get modified files for %s in %s",
                        commit.hash[:8], self.source_name,
                    )
                commits_seen += 1
        except _RepoTimeout:
            logger.warning(
                "Timed out after %ds extracting %s (got %d commits so far)",
                self.config.timeout_seconds, self.source_name, commits_seen,
            )
        except Exception:
            logger.exception("Error extracting git history from %s", self.source_path)
            raise
        finally:
            signal.alarm(0)
            signal.signal(signal.SIGALRM, old_handler)

        logger.info(
            "Extracted %d line rows from %d commits in %s",
            len(rows), commits_seen, self.source_name,
        )
        return rows
