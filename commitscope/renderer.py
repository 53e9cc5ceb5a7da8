"""Scatterplot layout: commit time (x) vs. hour of day (y), dots sized by lines.

The renderer keeps one CircleMark per visible commit, keyed by commit id, and
re-binds them on every render: marks for commits that stay visible are the
same objects, only moved and resized. The output is a Scene that the SVG and
PNG writers draw.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from commitscope.config import PlotConfig
from commitscope.models import Commit
from commitscope.scales import ScaleManager, UsableArea, format_time_tick
from commitscope.stats import format_full
from commitscope.widgets import TooltipWidget

logger = logging.getLogger(__name__)

# Bottom to top. Dots sit above the brush overlay so they stay hoverable.
LAYERS = ["gridlines", "x-axis", "y-axis", "brush-overlay", "dots", "brush-selection"]


def format_hour(value: float) -> str:
    return f"{int(value) % 24:02d}:00"


@dataclass
class CircleMark:
    commit_id: str
    cx: float
    cy: float
    r: float
    opacity: float
    selected: bool = False

    def contains(self, x: float, y: float) -> bool:
        return (x - self.cx) ** 2 + (y - self.cy) ** 2 <= self.r ** 2


@dataclass(frozen=True)
class AxisTick:
    position: float
    label: str


@dataclass
class JoinResult:
    entered: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    exited: list[str] = field(default_factory=list)


@dataclass
class Scene:
    """Everything needed to draw the plot once."""
    width: int
    height: int
    area: UsableArea
    circles: list[CircleMark]  # in draw order
    x_ticks: list[AxisTick]
    y_ticks: list[AxisTick]
    gridlines: list[float]  # y positions
    layers: list[str] = field(default_factory=lambda: list(LAYERS))
    color: str = "steelblue"


class ScatterplotRenderer:
    """Lays out commits using scales pulled from a ScaleManager."""

    def __init__(
        self,
        scales: ScaleManager,
        plot: PlotConfig,
        tooltip: TooltipWidget | None = None,
    ) -> None:
        self.scales = scales
        self.plot = plot
        self.tooltip = tooltip
        self.marks: dict[str, CircleMark] = {}
        self.order: list[str] = []
        self.last_join = JoinResult()
        self.hovered: str | None = None

    # --- Rendering ---

    def render(self, commits: list[Commit]) -> Scene:
        """Rescale to `commits`, then re-bind marks by commit id."""
        self.scales.rescale(commits)

        visible = [c for c in commits if c.datetime is not None]
        # largest first, so smaller circles end up on top
        ordered = sorted(visible, key=lambda c: -c.total_lines)

        join = JoinResult()
        keep: dict[str, CircleMark] = {}
        for c in ordered:
            cx, cy = self.scales.position(c)  # type: ignore[misc]
            r = self.scales.radius(c)
            mark = self.marks.get(c.id)
            if mark is None:
                mark = CircleMark(c.id, cx, cy, r, self.plot.dot_opacity)
                join.entered.append(c.id)
            else:
                mark.cx, mark.cy, mark.r = cx, cy, r
                join.updated.append(c.id)
            keep[c.id] = mark
        join.exited = [cid for cid in self.order if cid not in keep]

        if self.hovered in join.exited:
            self.leave(self.hovered)

        self.marks = keep
        self.order = [c.id for c in ordered]
        self.last_join = join
        logger.debug(
            "Rendered %d dots (+%d ~%d -%d)",
            len(self.order), len(join.entered), len(join.updated), len(join.exited),
        )
        return self.scene()

    def scene(self) -> Scene:
        area = self.scales.area
        x_ticks = [
            AxisTick(self.scales.x(t), format_time_tick(t))
            for t in self.scales.x.ticks()
        ]
        y_values = self.scales.y.ticks()
        y_ticks = [AxisTick(self.scales.y(v), format_hour(v)) for v in y_values]
        return Scene(
            width=self.plot.width,
            height=self.plot.height,
            area=area,
            circles=[self.marks[cid] for cid in self.order],
            x_ticks=x_ticks,
            y_ticks=y_ticks,
            gridlines=[t.position for t in y_ticks],
            color=self.plot.dot_color,
        )

    def mark_selected(self, selected_ids: set[str]) -> None:
        for cid, mark in self.marks.items():
            mark.selected = cid in selected_ids

    def hit_test(self, x: float, y: float) -> str | None:
        """Commit id of the topmost dot under (x, y), if any."""
        for cid in reversed(self.order):
            if self.marks[cid].contains(x, y):
                return cid
        return None

    # --- Hover ---

    def hover(self, commit: Commit, x: float, y: float) -> None:
        mark = self.marks.get(commit.id)
        if mark is None:
            return
        if self.hovered is not None and self.hovered != commit.id:
            previous = self.marks.get(self.hovered)
            if previous is not None:
                previous.opacity = self.plot.dot_opacity
        mark.opacity = self.plot.hover_opacity
        self.hovered = commit.id
        if self.tooltip is None:
            return
        self.tooltip.link_href = commit.url
        self.tooltip.link_text = commit.id
        self.tooltip.date_text = _tooltip_date(commit)
        self.tooltip.hidden = False
        self.move(x, y)

    def move(self, x: float, y: float) -> None:
        """Place the tooltip beside the pointer, flipped to stay in the viewport."""
        if self.tooltip is None:
            return
        offset = self.plot.tooltip_offset
        left = x + offset
        top = y + offset
        if left + self.tooltip.width > self.plot.viewport_width:
            left = x - self.tooltip.width - offset
        if top + self.tooltip.height > self.plot.viewport_height:
            top = y - self.tooltip.height - offset
        self.tooltip.left = left
        self.tooltip.top = top

    def leave(self, commit_id: str) -> None:
        mark = self.marks.get(commit_id)
        if mark is not None:
            mark.opacity = self.plot.dot_opacity
        if self.hovered == commit_id:
            self.hovered = None
        if self.tooltip is not None:
            self.tooltip.hidden = True


def _tooltip_date(commit: Commit) -> str:
    if isinstance(commit.datetime, datetime):
        return format_full(commit.datetime)
    return f"{commit.date} {commit.time}".strip()
