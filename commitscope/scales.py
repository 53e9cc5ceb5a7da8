"""Scales that map commit values to plot coordinates.

Linear, square-root and time scales follow d3's conventions: ticks land on
1/2/5 multiples of a power of ten, time ticks on calendar boundaries, and
`nice()` widens a domain to those boundaries. The ScaleManager owns the three
long-lived scales of the scatterplot and is the only thing that changes them.
"""

import bisect
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from commitscope.config import PlotConfig
from commitscope.models import Commit

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICRO = timedelta(microseconds=1)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


# --- Numeric ticks ---


def _tick_spec(start: float, stop: float, count: int) -> tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10 ** -power / factor
        i1, i2 = round(start * inc), round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        return i1, i2, -inc
    inc = 10 ** power * factor
    i1, i2 = round(start / inc), round(stop / inc)
    if i1 * inc < start:
        i1 += 1
    if i2 * inc > stop:
        i2 -= 1
    return i1, i2, inc


def tick_step(start: float, stop: float, count: int) -> float:
    """Distance between ticks, as d3.tickStep."""
    if count <= 0 or start == stop:
        return 0.0
    lo, hi = min(start, stop), max(start, stop)
    _, _, inc = _tick_spec(lo, hi, count)
    step = -1 / inc if inc < 0 else inc
    return step


def linear_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    """Round-numbered ticks covering [start, stop]."""
    if count <= 0:
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, count)
    if i2 < i1:
        return []
    if inc < 0:
        ticks = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        ticks = [float((i1 + i) * inc) for i in range(i2 - i1 + 1)]
    return ticks[::-1] if reverse else ticks


class LinearScale:
    """Continuous linear mapping from a numeric domain to a pixel range."""

    def __init__(
        self,
        domain: tuple[float, float] = (0.0, 1.0),
        range_: tuple[float, float] = (0.0, 1.0),
    ) -> None:
        self._domain = (float(domain[0]), float(domain[1]))
        self._range = (float(range_[0]), float(range_[1]))

    @property
    def domain(self) -> tuple[float, float]:
        return self._domain

    @property
    def range(self) -> tuple[float, float]:
        return self._range

    def rescale(self, domain: tuple[float, float]) -> None:
        """Replace the domain in place, keeping the scale's identity."""
        self._domain = (float(domain[0]), float(domain[1]))

    def _transform(self, v: float) -> float:
        return v

    def _untransform(self, v: float) -> float:
        return v

    def __call__(self, value: float) -> float:
        d0, d1 = (self._transform(d) for d in self._domain)
        r0, r1 = self._range
        if d1 == d0:
            return (r0 + r1) / 2
        t = (self._transform(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, y: float) -> float:
        d0, d1 = (self._transform(d) for d in self._domain)
        r0, r1 = self._range
        if r1 == r0:
            return self._domain[0]
        t = (y - r0) / (r1 - r0)
        return self._untransform(d0 + t * (d1 - d0))

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self._domain[0], self._domain[1], count)

    def nice(self, count: int = 10) -> None:
        d0, d1 = self._domain
        step = tick_step(d0, d1, count)
        if step > 0:
            self._domain = (math.floor(d0 / step) * step, math.ceil(d1 / step) * step)


class SqrtScale(LinearScale):
    """Square-root scale: circle *area* grows linearly with the value."""

    def _transform(self, v: float) -> float:
        return math.copysign(math.sqrt(abs(v)), v)

    def _untransform(self, v: float) -> float:
        return v * abs(v)


# --- Time intervals ---

_SECOND = 1.0
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY

# (unit, step, approximate duration in seconds), ascending by duration
TICK_INTERVALS: list[tuple[str, int, float]] = [
    ("second", 1, _SECOND),
    ("second", 5, 5 * _SECOND),
    ("second", 15, 15 * _SECOND),
    ("second", 30, 30 * _SECOND),
    ("minute", 1, _MINUTE),
    ("minute", 5, 5 * _MINUTE),
    ("minute", 15, 15 * _MINUTE),
    ("minute", 30, 30 * _MINUTE),
    ("hour", 1, _HOUR),
    ("hour", 3, 3 * _HOUR),
    ("hour", 6, 6 * _HOUR),
    ("hour", 12, 12 * _HOUR),
    ("day", 1, _DAY),
    ("day", 2, 2 * _DAY),
    ("week", 1, _WEEK),
    ("month", 1, _MONTH),
    ("month", 3, 3 * _MONTH),
    ("year", 1, _YEAR),
]
_DURATIONS = [d for _, _, d in TICK_INTERVALS]


def tick_interval(start: datetime, stop: datetime, count: int = 10) -> tuple[str, int]:
    """Pick the calendar interval whose size is closest to span / count."""
    target = abs((stop - start).total_seconds()) / max(count, 1)
    i = bisect.bisect_right(_DURATIONS, target)
    if i == len(TICK_INTERVALS):
        years = tick_step(start.year + start.timetuple().tm_yday / 365,
                          stop.year + stop.timetuple().tm_yday / 365, count)
        return "year", max(1, int(years))
    if i == 0:
        return "second", 1
    lower, upper = TICK_INTERVALS[i - 1], TICK_INTERVALS[i]
    unit, step, _ = lower if target / lower[2] < upper[2] / target else upper
    return unit, step


def _add_months(d: datetime, months: int) -> datetime:
    total = d.year * 12 + (d.month - 1) + months
    return d.replace(year=total // 12, month=total % 12 + 1)


def floor_time(d: datetime, unit: str, step: int = 1) -> datetime:
    """Latest interval boundary at or before d (wall clock of d's offset)."""
    if unit == "second":
        return d.replace(second=d.second - d.second % step, microsecond=0)
    if unit == "minute":
        return d.replace(minute=d.minute - d.minute % step, second=0, microsecond=0)
    if unit == "hour":
        return d.replace(hour=d.hour - d.hour % step, minute=0, second=0, microsecond=0)
    midnight = d.replace(hour=0, minute=0, second=0, microsecond=0)
    if unit == "day":
        return midnight.replace(day=midnight.day - (midnight.day - 1) % step)
    if unit == "week":
        # weeks start on Sunday
        return midnight - timedelta(days=(midnight.weekday() + 1) % 7)
    first = midnight.replace(day=1)
    if unit == "month":
        return first.replace(month=first.month - (first.month - 1) % step)
    if unit == "year":
        return first.replace(month=1, year=first.year - first.year % step)
    raise ValueError(f"Unknown time unit: {unit}")


def next_time(d: datetime, unit: str, step: int = 1) -> datetime:
    """The boundary following an aligned boundary d."""
    if unit == "second":
        return d + timedelta(seconds=step)
    if unit == "minute":
        return d + timedelta(minutes=step)
    if unit == "hour":
        return d + timedelta(hours=step)
    if unit == "week":
        return d + timedelta(weeks=step)
    if unit == "year":
        return d.replace(year=d.year + step)
    if unit == "day":
        nxt = d + timedelta(days=1)
        while (nxt.day - 1) % step:
            nxt += timedelta(days=1)
        return nxt
    if unit == "month":
        nxt = _add_months(d, 1)
        while (nxt.month - 1) % step:
            nxt = _add_months(nxt, 1)
        return nxt
    raise ValueError(f"Unknown time unit: {unit}")


def ceil_time(d: datetime, unit: str, step: int = 1) -> datetime:
    floored = floor_time(d, unit, step)
    return floored if floored == d else next_time(floored, unit, step)


def format_time_tick(d: datetime) -> str:
    """Label a tick by its coarsest non-zero field, like d3's default time format."""
    if d.microsecond:
        return f".{d.microsecond // 1000:03d}"
    if d.second:
        return d.strftime(":%S")
    if d.minute:
        return d.strftime("%I:%M")
    if d.hour:
        return d.strftime("%I %p")
    if d.day != 1:
        return d.strftime("%b %d") if d.weekday() == 6 else d.strftime("%a %d")
    if d.month != 1:
        return d.strftime("%B")
    return d.strftime("%Y")


def _to_micros(d: datetime) -> int:
    return (d - EPOCH) // _MICRO


class TimeScale:
    """Linear scale over datetimes.

    Positions are computed on integer microseconds so `invert(scale(t))`
    returns t exactly for any t inside the domain.
    """

    def __init__(
        self,
        domain: tuple[datetime, datetime] | None = None,
        range_: tuple[float, float] = (0.0, 1.0),
    ) -> None:
        self._domain = domain or (EPOCH, EPOCH + timedelta(days=1))
        self._range = (float(range_[0]), float(range_[1]))

    @property
    def domain(self) -> tuple[datetime, datetime]:
        return self._domain

    @property
    def range(self) -> tuple[float, float]:
        return self._range

    def rescale(self, domain: tuple[datetime, datetime]) -> None:
        self._domain = domain

    def __call__(self, value: datetime) -> float:
        d0, d1 = (_to_micros(d) for d in self._domain)
        r0, r1 = self._range
        if d1 == d0:
            return (r0 + r1) / 2
        t = (_to_micros(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, y: float) -> datetime:
        d0, d1 = (_to_micros(d) for d in self._domain)
        r0, r1 = self._range
        tz = self._domain[0].tzinfo or timezone.utc
        if r1 == r0:
            return self._domain[0]
        t = (y - r0) / (r1 - r0)
        micros = round(d0 + t * (d1 - d0))
        return (EPOCH + timedelta(microseconds=micros)).astimezone(tz)

    def nice(self, count: int = 10) -> None:
        d0, d1 = self._domain
        if d0 == d1:
            return
        unit, step = tick_interval(d0, d1, count)
        self._domain = (floor_time(d0, unit, step), ceil_time(d1, unit, step))

    def ticks(self, count: int = 10) -> list[datetime]:
        d0, d1 = sorted(self._domain)
        if d0 == d1:
            return [d0]
        unit, step = tick_interval(d0, d1, count)
        ticks: list[datetime] = []
        t = ceil_time(d0, unit, step)
        while t <= d1:
            ticks.append(t)
            t = next_time(t, unit, step)
        return ticks


# --- Scale manager ---


@dataclass(frozen=True)
class UsableArea:
    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @classmethod
    def from_config(cls, plot: PlotConfig) -> "UsableArea":
        return cls(
            left=plot.margin_left,
            right=plot.width - plot.margin_right,
            top=plot.margin_top,
            bottom=plot.height - plot.margin_bottom,
        )


class ScaleManager:
    """Owns the time (x), hour (y) and radius scales of the scatterplot.

    The scale objects live as long as the manager; `rescale` only swaps
    their domains, so anything holding a reference keeps a valid mapping.
    """

    def __init__(self, plot: PlotConfig) -> None:
        self.area = UsableArea.from_config(plot)
        self.x = TimeScale(range_=(self.area.left, self.area.right))
        self.y = LinearScale((0, 24), (self.area.bottom, self.area.top))
        self.r = SqrtScale((0, 1), (plot.radius_min, plot.radius_max))
        self._niced = False

    def rescale(self, commits: list[Commit]) -> None:
        """Fit x and r to the visible commits. Invalid datetimes are ignored."""
        times = [c.datetime for c in commits if c.datetime is not None]
        if times:
            lo, hi = min(times), max(times)
            if lo == hi:
                lo, hi = lo - timedelta(hours=12), hi + timedelta(hours=12)
            self.x.rescale((lo, hi))
            if not self._niced:
                self.x.nice()
                self._niced = True
        else:
            logger.debug("No datetimes in visible set; keeping x domain %s", self.x.domain)

        counts = [c.total_lines for c in commits]
        if counts:
            lo_n, hi_n = min(counts), max(counts)
            if lo_n == hi_n:
                lo_n = 0
            self.r.rescale((lo_n, hi_n or 1))
        else:
            self.r.rescale((0, 1))

    def position(self, commit: Commit) -> tuple[float, float] | None:
        """Plotted (x, y) of a commit, or None when it has no valid datetime."""
        if commit.datetime is None:
            return None
        return self.x(commit.datetime), self.y(commit.hour_frac)

    def radius(self, commit: Commit) -> float:
        return self.r(commit.total_lines)
