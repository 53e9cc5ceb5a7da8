"""Group per-line change rows into per-commit summaries."""

import logging
from datetime import datetime

from commitscope.models import Commit, LineChange

logger = logging.getLogger(__name__)


def _hour_frac(ts: datetime | None) -> float:
    """Hour of day as a fraction in the commit's own offset; 0 when invalid."""
    if ts is None:
        return 0.0
    return ts.hour + ts.minute / 60


def process_commits(lines: list[LineChange], repo_url: str) -> list[Commit]:
    """Group rows by commit id in first-seen order.

    Scalar fields come from the first row of each group, total_lines is the
    group size, and the group's rows stay attached to the Commit.
    """
    groups: dict[str, list[LineChange]] = {}
    for line in lines:
        groups.setdefault(line.commit, []).append(line)

    commits: list[Commit] = []
    base = repo_url.rstrip("/")
    for commit_id, rows in groups.items():
        first = rows[0]
        commit = Commit(
            id=commit_id,
            url=f"{base}/commit/{commit_id}",
            author=first.author,
            date=first.date,
            time=first.time,
            timezone=first.timezone,
            datetime=first.datetime,
            hour_frac=_hour_frac(first.datetime),
        )
        commit.attach_lines(rows)
        commits.append(commit)

    return commits


class CommitCollection:
    """Canonical, chronologically sorted set of commits.

    Filtered views are always rebuilt from this list, never patched.
    """

    def __init__(self, commits: list[Commit]) -> None:
        valid = sorted(
            (c for c in commits if c.datetime is not None),
            key=lambda c: c.datetime,  # type: ignore[arg-type,return-value]
        )
        invalid = [c for c in commits if c.datetime is None]
        self._commits: list[Commit] = valid + invalid
        self._by_id = {c.id: c for c in self._commits}
        if invalid:
            logger.info("%d commits have no valid datetime", len(invalid))

    @classmethod
    def from_lines(cls, lines: list[LineChange], repo_url: str) -> "CommitCollection":
        return cls(process_commits(lines, repo_url))

    @property
    def commits(self) -> list[Commit]:
        return list(self._commits)

    @property
    def lines(self) -> list[LineChange]:
        return [line for c in self._commits for line in c.lines]

    def __len__(self) -> int:
        return len(self._commits)

    def __iter__(self):
        return iter(self._commits)

    def __getitem__(self, index: int) -> Commit:
        return self._commits[index]

    def get(self, commit_id: str) -> Commit | None:
        return self._by_id.get(commit_id)

    def index_of(self, commit_id: str) -> int:
        for i, c in enumerate(self._commits):
            if c.id == commit_id:
                return i
        raise ValueError(f"Commit not found: {commit_id}")

    def time_extent(self) -> tuple[datetime, datetime] | None:
        """(min, max) over valid datetimes, or None if there are none."""
        valid = [c.datetime for c in self._commits if c.datetime is not None]
        if not valid:
            return None
        return min(valid), max(valid)

    def filtered(self, cutoff: datetime | None) -> list[Commit]:
        """Commits with datetime <= cutoff, in canonical order."""
        if cutoff is None:
            return []
        return [c for c in self._commits if c.datetime is not None and c.datetime <= cutoff]
