"""Shared test fixtures for commitscope tests."""

from datetime import datetime

import pytest

from commitscope.config import Config
from commitscope.explorer import Explorer
from commitscope.models import LineChange
from commitscope.widgets import Widgets


def make_line(
    commit: str,
    ts: str | None,
    type: str = "js",
    file: str | None = None,
    line: int = 1,
    depth: int = 0,
    length: int = 10,
) -> LineChange:
    """LineChange whose date/time/timezone strings agree with `ts`."""
    dt = datetime.fromisoformat(ts) if ts else None
    return LineChange(
        commit=commit,
        file=file or f"src/main.{type}",
        type=type,
        line=line,
        depth=depth,
        length=length,
        author="tachi",
        date=dt.strftime("%Y-%m-%d") if dt else "",
        time=dt.strftime("%H:%M") if dt else "00:00",
        timezone="+00:00",
        datetime=dt,
    )


@pytest.fixture()
def config():
    return Config()


@pytest.fixture()
def scenario_lines():
    """Commit A: 5 css lines at 09:00 Jan 1. Commit B: 3 js lines at 14:30 Jan 2."""
    a = [
        make_line("aaa111", "2024-01-01T09:00+00:00", type="css", file="style.css", line=i)
        for i in range(1, 6)
    ]
    b = [
        make_line("bbb222", "2024-01-02T14:30+00:00", type="js", file="meta/main.js", line=i)
        for i in range(1, 4)
    ]
    return a + b


@pytest.fixture()
def history_lines():
    """Five commits over a week, given out of chronological order."""
    specs = [
        ("c3", "2024-03-03T23:15+00:00", "js", 4),
        ("c1", "2024-03-01T10:00+00:00", "html", 12),
        ("c5", "2024-03-07T16:45+00:00", "css", 1),
        ("c2", "2024-03-02T08:30+00:00", "css", 7),
        ("c4", "2024-03-05T13:00+00:00", "js", 2),
    ]
    lines: list[LineChange] = []
    for cid, ts, kind, n in specs:
        lines.extend(
            make_line(cid, ts, type=kind, file=f"{cid}.{kind}", line=i, depth=i % 3, length=10 * i)
            for i in range(1, n + 1)
        )
    return lines


@pytest.fixture()
def explorer(scenario_lines, config):
    """Explorer over the two-commit scenario with every widget present."""
    return Explorer(
        scenario_lines, config,
        Widgets.full((config.plot.tooltip_width, config.plot.tooltip_height)),
    )
