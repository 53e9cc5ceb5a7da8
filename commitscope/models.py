"""Pydantic models for commitscope."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator


# --- Input rows (what comes out of loc.csv) ---


class LineChange(BaseModel):
    """One changed line of the log. `datetime` is None when unparseable."""
    model_config = ConfigDict(frozen=True)

    commit: str
    file: str
    type: str
    line: int = 0
    depth: int = 0
    length: int = 0
    author: str = ""
    date: str = ""
    time: str = "00:00"
    timezone: str = "+00:00"
    datetime: dt.datetime | None = None

    @field_validator("datetime")
    @classmethod
    def _naive_as_utc(cls, v: dt.datetime | None) -> dt.datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=dt.timezone.utc)
        return v


# --- Derived models ---


class Commit(BaseModel):
    """Per-commit summary built from its LineChange rows.

    The rows themselves live in a private attribute: they are reachable
    through `lines` but stay out of `model_dump()` and field iteration.
    """
    id: str
    url: str
    author: str = ""
    date: str = ""
    time: str = ""
    timezone: str = ""
    datetime: dt.datetime | None = None
    hour_frac: float = 0.0
    total_lines: int = 0

    _lines: tuple[LineChange, ...] = PrivateAttr(default=())

    @property
    def lines(self) -> tuple[LineChange, ...]:
        return self._lines

    def attach_lines(self, lines: list[LineChange]) -> None:
        self._lines = tuple(lines)
        self.total_lines = len(self._lines)

    @property
    def file_count(self) -> int:
        return len({line.file for line in self._lines})


class Project(BaseModel):
    """A gallery entry from projects.json."""
    title: str
    description: str = ""
    year: str
    image: str | None = None
    url: str | None = None

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_str(cls, v: object) -> object:
        return str(v) if isinstance(v, int) else v
