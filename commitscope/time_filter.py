"""Commit cutoff state shared by the slider and the narrative scroller."""

import logging
from collections.abc import Callable
from datetime import datetime

from commitscope.aggregator import CommitCollection
from commitscope.models import Commit
from commitscope.scales import TimeScale

logger = logging.getLogger(__name__)

FilterListener = Callable[[list[Commit]], None]


class TimeFilterController:
    """Single owner of (commit_max_time, commit_progress).

    Progress is a 0-100 position on a time scale built once from the full
    collection's extent. Setting either value recomputes the other, rebuilds
    the filtered view from the canonical collection and notifies listeners
    in registration order.
    """

    def __init__(self, collection: CommitCollection) -> None:
        self.collection = collection
        extent = collection.time_extent()
        self.progress_scale = TimeScale(extent, (0, 100))
        self._has_times = extent is not None
        self.commit_max_time: datetime | None = (
            self.progress_scale.invert(100) if self._has_times else None
        )
        self.commit_progress: float = (
            self._progress_of(self.commit_max_time) if self.commit_max_time is not None else 100.0
        )
        self.filtered: list[Commit] = collection.filtered(self.commit_max_time)
        self._listeners: list[FilterListener] = []

    def subscribe(self, listener: FilterListener) -> None:
        self._listeners.append(listener)

    def set_by_percentage(self, progress: float) -> list[Commit]:
        progress = min(max(float(progress), 0.0), 100.0)
        self.commit_progress = progress
        self.commit_max_time = None
        if self._has_times:
            self.commit_max_time = self.progress_scale.invert(progress)
            lo, hi = self.progress_scale.domain
            if lo == hi:
                self.commit_progress = self._progress_of(self.commit_max_time)
        return self._recompute()

    def set_by_time(self, cutoff: datetime) -> list[Commit]:
        self.commit_max_time = cutoff
        if self._has_times:
            self.commit_progress = self._progress_of(cutoff)
        return self._recompute()

    def _progress_of(self, cutoff: datetime) -> float:
        lo, hi = self.progress_scale.domain
        if lo == hi:
            # single timestamp
            return 100.0 if cutoff >= hi else 0.0
        return min(max(self.progress_scale(cutoff), 0.0), 100.0)

    def _recompute(self) -> list[Commit]:
        self.filtered = self.collection.filtered(self.commit_max_time)
        logger.debug(
            "Cutoff %s (%.2f%%): %d/%d commits visible",
            self.commit_max_time, self.commit_progress,
            len(self.filtered), len(self.collection),
        )
        for listener in self._listeners:
            listener(self.filtered)
        return self.filtered
