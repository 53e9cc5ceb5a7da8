"""Scrollytelling: one narrative step per commit, bound to the cutoff.

Step text comes from an ordered rule list; the first rule whose predicate
matches a step renders it, and the last rule always matches.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from commitscope.aggregator import CommitCollection
from commitscope.models import Commit
from commitscope.stats import format_long
from commitscope.time_filter import TimeFilterController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepContext:
    index: int
    total: int
    commit: Commit
    date_notes: dict[str, str] = field(default_factory=dict)
    milestones: tuple[int, ...] = ()

    @property
    def when(self) -> str:
        if self.commit.datetime is None:
            if not self.commit.date:
                return "an unknown date"
            return f"{self.commit.date} {self.commit.time}".strip()
        return format_long(self.commit.datetime)

    @property
    def lines(self) -> int:
        return self.commit.total_lines

    @property
    def files(self) -> int:
        return self.commit.file_count


@dataclass(frozen=True)
class NarrativeRule:
    name: str
    matches: Callable[[StepContext], bool]
    render: Callable[[StepContext], str]


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _is_late(ctx: StepContext) -> bool:
    return ctx.commit.datetime is not None and (ctx.commit.hour_frac >= 22 or ctx.commit.hour_frac < 5)


NARRATIVE_RULES: list[NarrativeRule] = [
    NarrativeRule(
        "first",
        lambda ctx: ctx.index == 0,
        lambda ctx: (
            f"On {ctx.when}, I made the very first commit of this site, "
            f"laying down {_plural(ctx.lines, 'line')} across {_plural(ctx.files, 'file')}."
        ),
    ),
    NarrativeRule(
        "second",
        lambda ctx: ctx.index == 1 and ctx.total > 2,
        lambda ctx: (
            f"The next commit followed on {ctx.when}: "
            f"{_plural(ctx.lines, 'line')} in {_plural(ctx.files, 'file')} as the structure took shape."
        ),
    ),
    NarrativeRule(
        "date-note",
        lambda ctx: ctx.commit.date in ctx.date_notes,
        lambda ctx: (
            f"On {ctx.when}, {ctx.date_notes[ctx.commit.date]} "
            f"({_plural(ctx.lines, 'line')}, {_plural(ctx.files, 'file')})"
        ),
    ),
    NarrativeRule(
        "last",
        lambda ctx: ctx.index == ctx.total - 1 and ctx.total > 1,
        lambda ctx: (
            f"And most recently, on {ctx.when}, I edited {_plural(ctx.lines, 'line')} "
            f"across {_plural(ctx.files, 'file')}. That brings the story up to date."
        ),
    ),
    NarrativeRule(
        "milestone",
        lambda ctx: ctx.index + 1 in ctx.milestones,
        lambda ctx: (
            f"Commit number {ctx.index + 1} landed on {ctx.when}, "
            f"touching {_plural(ctx.lines, 'line')} across {_plural(ctx.files, 'file')}."
        ),
    ),
    NarrativeRule(
        "late-night",
        _is_late,
        lambda ctx: (
            f"Late at night on {ctx.when}, I pushed {_plural(ctx.lines, 'line')} "
            f"across {_plural(ctx.files, 'file')}."
        ),
    ),
    NarrativeRule(
        "default",
        lambda ctx: True,
        lambda ctx: (
            f"On {ctx.when}, I edited {_plural(ctx.lines, 'line')} "
            f"across {_plural(ctx.files, 'file')}."
        ),
    ),
]


def narrate(ctx: StepContext, rules: list[NarrativeRule] | None = None) -> tuple[str, str]:
    """(rule name, text) from the first matching rule."""
    for rule in rules or NARRATIVE_RULES:
        if rule.matches(ctx):
            return rule.name, rule.render(ctx)
    raise ValueError("Narrative rules need a catch-all rule at the end")


@dataclass
class NarrativeStep:
    index: int
    commit: Commit
    text: str
    rule: str
    active: bool = False


def build_steps(
    collection: CommitCollection,
    date_notes: dict[str, str] | None = None,
    milestones: list[int] | None = None,
    rules: list[NarrativeRule] | None = None,
) -> list[NarrativeStep]:
    """One step per commit, in the collection's chronological order."""
    total = len(collection)
    steps: list[NarrativeStep] = []
    for i, commit in enumerate(collection):
        ctx = StepContext(
            index=i,
            total=total,
            commit=commit,
            date_notes=date_notes or {},
            milestones=tuple(milestones or ()),
        )
        rule, text = narrate(ctx, rules)
        steps.append(NarrativeStep(index=i, commit=commit, text=text, rule=rule))
    return steps


class NarrativeScroller:
    """Activates the step that enters the viewport and moves the cutoff to it."""

    def __init__(
        self,
        steps: list[NarrativeStep],
        controller: TimeFilterController,
        step_height: int = 120,
    ) -> None:
        self.steps = steps
        self.controller = controller
        self.step_height = max(step_height, 1)
        self.active_index: int | None = None

    @property
    def active_step(self) -> NarrativeStep | None:
        if self.active_index is None:
            return None
        return self.steps[self.active_index]

    def enter_step(self, index: int) -> NarrativeStep | None:
        if not self.steps:
            return None
        index = min(max(index, 0), len(self.steps) - 1)
        if index == self.active_index:
            return self.steps[index]

        if self.active_index is not None:
            self.steps[self.active_index].active = False
        step = self.steps[index]
        step.active = True
        self.active_index = index

        if step.commit.datetime is None:
            logger.debug("Step %d has no datetime; cutoff unchanged", index)
        else:
            self.controller.set_by_time(step.commit.datetime)
        return step

    def scroll_to(self, offset: float) -> NarrativeStep | None:
        """Enter the step whose slot contains the scroll offset (px)."""
        return self.enter_step(int(max(offset, 0) // self.step_height))
