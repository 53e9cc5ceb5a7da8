"""Read and write the per-line change log (loc.csv)."""

import csv
import logging
from datetime import datetime
from pathlib import Path

from commitscope.extractors.base import BaseExtractor
from commitscope.models import LineChange

logger = logging.getLogger(__name__)

LOC_COLUMNS = [
    "commit", "file", "type", "line", "depth", "length",
    "author", "date", "time", "timezone", "datetime",
]

DEFAULT_TIME = "00:00"
DEFAULT_TIMEZONE = "+00:00"


def _to_int(raw: str | None) -> int:
    try:
        return int(raw) if raw not in (None, "") else 0
    except ValueError:
        return 0


def parse_timestamp(raw: str) -> datetime | None:
    """Parse an ISO 8601 timestamp; junk → None. LineChange makes naive values UTC."""
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        return None


def parse_line_change(row: dict[str, str]) -> LineChange:
    """Build a LineChange from a raw CSV row, applying the column defaults.

    Missing time → 00:00, missing timezone → +00:00, missing datetime is
    composed from date + time + timezone. Never raises on bad values.
    """
    date = (row.get("date") or "").strip()
    time = (row.get("time") or "").strip() or DEFAULT_TIME
    tz = (row.get("timezone") or "").strip() or DEFAULT_TIMEZONE
    raw_dt = (row.get("datetime") or "").strip() or f"{date}T{time}{tz}"

    ts = parse_timestamp(raw_dt)
    if ts is None:
        logger.debug("Unparseable datetime %r for commit %s", raw_dt, row.get("commit"))

    return LineChange(
        commit=row.get("commit") or "",
        file=row.get("file") or "",
        type=row.get("type") or "",
        line=_to_int(row.get("line")),
        depth=_to_int(row.get("depth")),
        length=_to_int(row.get("length")),
        author=row.get("author") or "",
        date=date,
        time=time,
        timezone=tz,
        datetime=ts,
    )


class CsvLogExtractor(BaseExtractor):
    """Load LineChange rows from a loc.csv file."""

    def extract(self) -> list[LineChange]:
        if not self.source_path.exists():
            raise FileNotFoundError(f"Line log not found: {self.source_path}")

        rows: list[LineChange] = []
        with self.source_path.open(newline="", encoding="utf-8") as f:
            for raw in csv.DictReader(f):
                if not raw.get("commit"):
                    logger.debug("Skipping row without commit id: %s", raw)
                    continue
                rows.append(parse_line_change(raw))

        logger.info("Loaded %d line rows from %s", len(rows), self.source_name)
        return rows


def write_line_changes(rows: list[LineChange], output_path: Path) -> Path:
    """Write rows as loc.csv (same columns the extractor reads)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=LOC_COLUMNS)
        writer.writeheader()
        for r in rows:
            record = r.model_dump()
            record["datetime"] = r.datetime.isoformat() if r.datetime else ""
            writer.writerow(record)
    logger.info("Wrote %d line rows to %s", len(rows), output_path)
    return output_path
