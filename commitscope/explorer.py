"""The commit explorer: wires data, scales, views and controls together.

All user input goes through `Explorer.dispatch`. Each event is handled to
completion (state change, then redraw) before the next one is accepted.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from commitscope.aggregator import CommitCollection
from commitscope.config import Config
from commitscope.extractors.csv_extractor import CsvLogExtractor
from commitscope.models import Commit, LineChange
from commitscope.narrative import NarrativeScroller, build_steps
from commitscope.renderer import Scene, ScatterplotRenderer
from commitscope.scales import ScaleManager
from commitscope.selection import (
    BrushSelection,
    language_breakdown,
    selected_commits,
    selection_count_text,
)
from commitscope.stats import commit_summary, file_distribution, format_long
from commitscope.time_filter import TimeFilterController
from commitscope.widgets import Widgets

logger = logging.getLogger(__name__)


# --- Events ---


@dataclass(frozen=True)
class BrushEvent:
    selection: BrushSelection | None


@dataclass(frozen=True)
class SliderInput:
    progress: float


@dataclass(frozen=True)
class ScrollEvent:
    offset: float


@dataclass(frozen=True)
class StepEnter:
    index: int


@dataclass(frozen=True)
class PointerEnter:
    commit_id: str
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerLeave:
    commit_id: str


ExplorerEvent = (
    BrushEvent | SliderInput | ScrollEvent | StepEnter
    | PointerEnter | PointerMove | PointerLeave
)


class Explorer:
    """Commit-history explorer over a fully loaded line log."""

    def __init__(
        self,
        lines: list[LineChange],
        config: Config,
        widgets: Widgets | None = None,
    ) -> None:
        self.config = config
        self.widgets = widgets if widgets is not None else Widgets()
        self.collection = CommitCollection.from_lines(lines, config.site.repo_url)

        self.scales = ScaleManager(config.plot)
        self.renderer = ScatterplotRenderer(self.scales, config.plot, self.widgets.tooltip)
        self.controller = TimeFilterController(self.collection)
        self.steps = build_steps(
            self.collection,
            date_notes=config.narrative.date_notes,
            milestones=config.narrative.milestones,
        )
        self.scroller = NarrativeScroller(
            self.steps, self.controller, step_height=config.narrative.step_height,
        )
        self.selection: BrushSelection | None = None
        self.scene: Scene | None = None

        self.controller.subscribe(self._on_filter_change)
        self._handlers = {
            BrushEvent: self._on_brush,
            SliderInput: self._on_slider,
            ScrollEvent: self._on_scroll,
            StepEnter: self._on_step_enter,
            PointerEnter: self._on_pointer_enter,
            PointerMove: self._on_pointer_move,
            PointerLeave: self._on_pointer_leave,
        }

        self._on_filter_change(self.controller.filtered)
        logger.info(
            "Explorer ready: %d commits, %d steps", len(self.collection), len(self.steps),
        )

    @classmethod
    def from_csv(cls, path: Path, config: Config, widgets: Widgets | None = None) -> "Explorer":
        return cls(CsvLogExtractor(path).extract(), config, widgets)

    @property
    def visible(self) -> list[Commit]:
        return self.controller.filtered

    # --- Dispatch ---

    def dispatch(self, event: ExplorerEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise ValueError(f"Unsupported event: {event!r}")
        handler(event)

    def _on_brush(self, event: BrushEvent) -> None:
        self.selection = event.selection
        self._apply_selection()

    def _on_slider(self, event: SliderInput) -> None:
        self.controller.set_by_percentage(event.progress)

    def _on_scroll(self, event: ScrollEvent) -> None:
        self.scroller.scroll_to(event.offset)

    def _on_step_enter(self, event: StepEnter) -> None:
        self.scroller.enter_step(event.index)

    def _on_pointer_enter(self, event: PointerEnter) -> None:
        commit = self.collection.get(event.commit_id)
        if commit is not None:
            self.renderer.hover(commit, event.x, event.y)

    def _on_pointer_move(self, event: PointerMove) -> None:
        if self.renderer.hovered is not None:
            self.renderer.move(event.x, event.y)

    def _on_pointer_leave(self, event: PointerLeave) -> None:
        self.renderer.leave(event.commit_id)

    # --- Redraw ---

    def _on_filter_change(self, visible: list[Commit]) -> None:
        self.scene = self.renderer.render(visible)
        self._render_cutoff()
        self._render_stats(visible)
        self._render_file_distribution(visible)
        # dots moved; the brush has to be re-evaluated against them
        self._apply_selection()

    def _apply_selection(self) -> None:
        chosen = selected_commits(self.selection, self.visible, self.scales)
        self.renderer.mark_selected({c.id for c in chosen})

        w = self.widgets
        if w.selection_count is not None:
            w.selection_count.text = selection_count_text(len(chosen))
        if w.language_breakdown is not None:
            rows = language_breakdown(chosen)
            if not rows:
                w.language_breakdown.clear()
            else:
                w.language_breakdown.items = [(row.type, row.label) for row in rows]

    def _render_cutoff(self) -> None:
        w = self.widgets
        if w.slider is not None:
            w.slider.value = self.controller.commit_progress
        if w.time_display is not None:
            w.time_display.text = format_long(self.controller.commit_max_time)

    def _render_stats(self, visible: list[Commit]) -> None:
        if self.widgets.stats is not None:
            self.widgets.stats.items = commit_summary(visible)

    def _render_file_distribution(self, visible: list[Commit]) -> None:
        if self.widgets.file_distribution is not None:
            self.widgets.file_distribution.items = [
                (f.name, f.label) for f in file_distribution(visible)
            ]

    def selected(self) -> list[Commit]:
        return selected_commits(self.selection, self.visible, self.scales)
