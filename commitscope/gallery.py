"""Project gallery: text search plus a year pie chart that doubles as a filter.

The pie always summarizes every project; the list shows projects matching
both the query and the selected year. Clicking a slice (or its legend entry)
selects that year, clicking it again clears the selection.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from commitscope.models import Project

logger = logging.getLogger(__name__)

# Tableau 10
PALETTE = [
    "#4e79a7", "#f28e2b", "#e15759", "#76b7b2", "#59a14f",
    "#edc948", "#b07aa1", "#ff9da7", "#9c755f", "#bab0ac",
]

_K = 0.7  # per-step brightness factor


def _adjust(hex_color: str, k: float) -> str:
    """Brighten (k > 0) or darken (k < 0) a color by k steps."""
    factor = (1 / _K) ** k
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (1, 3, 5))
    r, g, b = (min(255, max(0, round(v * factor))) for v in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def load_projects(path: Path) -> list[Project]:
    if not path.exists():
        raise FileNotFoundError(f"Projects file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        projects = [Project(**p) for p in raw]
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise ValueError(f"Invalid projects file {path}: {e}") from e
    logger.info("Loaded %d projects from %s", len(projects), path.name)
    return projects


def matches_query(project: Project, query: str) -> bool:
    """Case-insensitive search across every field of the project."""
    if not query:
        return True
    haystack = "\n".join(str(v) for v in project.model_dump().values() if v is not None)
    return query.lower() in haystack.lower()


@dataclass(frozen=True)
class PieSlice:
    label: str
    value: int
    start_angle: float
    end_angle: float
    color: str
    selected: bool = False


def year_slices(projects: list[Project], selected_year: str | None = None) -> list[PieSlice]:
    """One slice per year in first-seen order; angles laid out largest-first."""
    counts: dict[str, int] = {}
    for p in projects:
        counts[p.year] = counts.get(p.year, 0) + 1

    total = sum(counts.values())
    labels = list(counts)
    angles: dict[str, tuple[float, float]] = {}
    angle = 0.0
    for label in sorted(labels, key=lambda y: -counts[y]):
        span = 2 * math.pi * counts[label] / total if total else 0.0
        angles[label] = (angle, angle + span)
        angle += span

    slices: list[PieSlice] = []
    for i, label in enumerate(labels):
        base = _adjust(PALETTE[i % len(PALETTE)], 1.5)
        selected = label == selected_year
        slices.append(PieSlice(
            label=label,
            value=counts[label],
            start_angle=angles[label][0],
            end_angle=angles[label][1],
            color=_adjust(base, -0.3) if selected else base,
            selected=selected,
        ))
    return slices


class ProjectGallery:
    """Search and year-filter state over a fixed list of projects."""

    def __init__(self, projects: list[Project]) -> None:
        self.projects = projects
        self.query = ""
        self.selected_year: str | None = None

    def search(self, query: str) -> list[Project]:
        self.query = query.lower()
        return self.visible

    def toggle_year(self, year: str) -> list[Project]:
        self.selected_year = None if self.selected_year == year else year
        return self.visible

    @property
    def visible(self) -> list[Project]:
        return [
            p for p in self.projects
            if matches_query(p, self.query)
            and (self.selected_year is None or p.year == self.selected_year)
        ]

    @property
    def slices(self) -> list[PieSlice]:
        return year_slices(self.projects, self.selected_year)

    def describe(self, year: str | None = None) -> str:
        """Text for the details bar under the pie."""
        year = year if year is not None else self.selected_year
        if year is None:
            return "Hover or click on a slice to see details."
        count = sum(1 for p in self.projects if p.year == year)
        return f"Year: {year}, Projects: {count}"
