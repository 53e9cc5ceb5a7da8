"""Brush selection over the scatterplot and the stats derived from it."""

from dataclasses import dataclass

from commitscope.models import Commit
from commitscope.scales import ScaleManager


@dataclass(frozen=True)
class BrushSelection:
    """Axis-aligned brush rectangle in plot pixels, normalized so x0<=x1, y0<=y1."""
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_corners(
        cls,
        corner_a: tuple[float, float],
        corner_b: tuple[float, float],
    ) -> "BrushSelection":
        (ax, ay), (bx, by) = corner_a, corner_b
        return cls(min(ax, bx), min(ay, by), max(ax, bx), max(ay, by))

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


def is_commit_selected(
    selection: BrushSelection | None,
    commit: Commit,
    scales: ScaleManager,
) -> bool:
    if selection is None:
        return False
    pos = scales.position(commit)
    if pos is None:
        return False
    return selection.contains(*pos)


def selected_commits(
    selection: BrushSelection | None,
    commits: list[Commit],
    scales: ScaleManager,
) -> list[Commit]:
    if selection is None:
        return []
    return [c for c in commits if is_commit_selected(selection, c, scales)]


def selection_count_text(count: int) -> str:
    return f"{count or 'No'} commits selected"


@dataclass(frozen=True)
class BreakdownRow:
    """Line count for one category (file type) within a selection."""
    type: str
    count: int
    fraction: float

    @property
    def percent(self) -> str:
        return f"{self.fraction:.1%}"

    @property
    def label(self) -> str:
        return f"{self.count} lines ({self.percent})"


def language_breakdown(commits: list[Commit]) -> list[BreakdownRow]:
    """Group the selected commits' lines by type, in first-seen order.

    An empty selection yields no rows at all.
    """
    lines = [line for c in commits for line in c.lines]
    if not lines:
        return []

    counts: dict[str, int] = {}
    for line in lines:
        counts[line.type] = counts.get(line.type, 0) + 1

    total = len(lines)
    return [BreakdownRow(t, n, n / total) for t, n in counts.items()]
