"""
Alert storage: one JSON object per line (JSON Lines).

Records are appended, never rewritten, so multiple runs (and concurrent
uploads sharing one store) accumulate history. The query side filters by
IP and detection time and returns the newest alerts first.
"""

import json
import threading
import uuid
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional, Union

from . import config
from . import logger

DateLike = Union[str, date, datetime]


def _naive(value: datetime) -> datetime:
    """Stored times are naive local time; convert aware values to match."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _to_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return _naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return _naive(datetime.fromisoformat(value.strip()))


def _end_of_day(value: DateLike) -> datetime:
    """Make an upper bound inclusive through the end of its day."""
    return datetime.combine(_to_datetime(value).date(), time.max)


class JsonlAlertStore:
    """Append-only alert store backed by a JSON Lines file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else config.ALERTS_FILE
        self._lock = threading.Lock()

    def create(self, record: dict) -> dict:
        """Append one alert record; returns it with its assigned id."""
        stored = {"id": uuid.uuid4().hex, **record}
        line = json.dumps(stored, default=str) + "\n"
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        return stored

    def all(self) -> List[dict]:
        """Every stored record, in file order. Corrupt lines are skipped."""
        if not self.path.exists():
            return []
        records = []
        with self._lock:
            with open(self.path, "r", encoding="utf-8", errors="replace") as f:
                lines = f.readlines()
        for line_number, line in enumerate(lines, 1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except ValueError as e:
                logger.log_warn(
                    "Skipping corrupt alert record",
                    path=str(self.path),
                    line_number=line_number,
                    error=str(e),
                )
        return records

    def query(
        self,
        ip: Optional[str] = None,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> List[dict]:
        """
        Filter stored alerts, newest first.

        Args:
            ip: Exact source address to match.
            start: Inclusive lower bound on detected_at.
            end: Inclusive upper bound; covers the whole day it falls on.
        """
        lower = _to_datetime(start) if start else None
        upper = _end_of_day(end) if end else None

        matches = []
        for record in self.all():
            if ip and record.get("ip") != ip:
                continue
            try:
                detected_at = _naive(datetime.fromisoformat(record["detected_at"]))
            except (KeyError, TypeError, ValueError):
                continue
            if lower is not None and detected_at < lower:
                continue
            if upper is not None and detected_at > upper:
                continue
            matches.append((detected_at, record))

        matches.sort(key=lambda pair: pair[0], reverse=True)
        return [record for _, record in matches]
