"""Summary statistics and file distribution for a set of commits.

Pure aggregation over Commit.lines, recomputed from scratch on every
cutoff change.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from commitscope.models import Commit

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


# --- Date formatting ---


def _clock(d: datetime, seconds: bool = False) -> str:
    hour = d.hour % 12 or 12
    suffix = "AM" if d.hour < 12 else "PM"
    if seconds:
        return f"{hour}:{d:%M:%S} {suffix}"
    return f"{hour}:{d:%M} {suffix}"


def format_short(d: datetime | None) -> str:
    """'1/2/2024, 2:30:00 PM'"""
    if d is None:
        return NOT_AVAILABLE
    return f"{d.month}/{d.day}/{d.year}, {_clock(d, seconds=True)}"


def format_long(d: datetime | None) -> str:
    """'January 2, 2024 at 2:30 PM'"""
    if d is None:
        return NOT_AVAILABLE
    return f"{d:%B} {d.day}, {d.year} at {_clock(d)}"


def format_full(d: datetime | None) -> str:
    """'Tuesday, January 2, 2024 at 2:30 PM'"""
    if d is None:
        return NOT_AVAILABLE
    return f"{d:%A}, {format_long(d)}"


# --- Summary ---


def commit_summary(commits: list[Commit]) -> list[tuple[str, str]]:
    """(label, value) pairs for the stats <dl>. Zero/N/A on empty input."""
    lines = [line for c in commits for line in c.lines]
    per_commit = [c.total_lines for c in commits]
    times = [c.datetime for c in commits if c.datetime is not None]

    mean = sum(per_commit) / len(per_commit) if per_commit else 0.0

    return [
        ("Total LOC", str(len(lines))),
        ("Total commits", str(len(commits))),
        ("Files", str(len({line.file for line in lines}))),
        ("Max lines edited (single commit)", str(max(per_commit, default=0))),
        ("Mean lines per commit", f"{mean:.2f}"),
        ("Max depth", str(max((line.depth for line in lines), default=0))),
        ("Longest line", str(max((line.length for line in lines), default=0))),
        ("Earliest commit", format_short(min(times)) if times else NOT_AVAILABLE),
        ("Latest commit", format_short(max(times)) if times else NOT_AVAILABLE),
    ]


# --- File distribution ---


@dataclass
class FileSummary:
    """Lines one file has in the visible commits, broken down by type."""
    name: str
    lines: int = 0
    types: dict[str, int] = field(default_factory=dict)

    @property
    def dominant_type(self) -> str:
        if not self.types:
            return ""
        return max(self.types.items(), key=lambda kv: kv[1])[0]

    @property
    def label(self) -> str:
        return f"{self.lines} lines"


def file_distribution(commits: list[Commit]) -> list[FileSummary]:
    """Per-file line counts, largest file first (ties keep first-seen order)."""
    files: dict[str, FileSummary] = {}
    for c in commits:
        for line in c.lines:
            summary = files.get(line.file)
            if summary is None:
                summary = files[line.file] = FileSummary(line.file)
            summary.lines += 1
            summary.types[line.type] = summary.types.get(line.type, 0) + 1

    return sorted(files.values(), key=lambda f: -f.lines)
