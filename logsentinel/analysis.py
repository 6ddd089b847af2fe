"""
One analysis run over one uploaded log.

Orchestrates:
1. Split the blob into lines (count + preview)
2. Extract failed-login events
3. Build per-IP timelines and detect bursts
4. Hand alerts to the injected store/notifier

A run shares nothing mutable with other runs, so concurrent uploads can
call analyze_text() on the same DetectionConfig without locking.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from . import config
from . import logger
from .alerts import AlertStore, Notifier, emit_alerts
from .detector import BurstAlert, DetectionConfig, build_timelines, default_config, find_bursts
from .log_parser import extract_events


class MissingInputError(ValueError):
    """Raised when a run is started without any log content."""


@dataclass
class AnalysisResult:
    """What one run returns to its caller."""

    total_lines: int
    preview: List[str]
    alerts: List[BurstAlert] = field(default_factory=list)
    events: int = 0
    stored: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "message": "Log analyzed",
            "total_lines": self.total_lines,
            "events": self.events,
            "preview": self.preview,
            "suspicious_ips": [alert.to_record() for alert in self.alerts],
        }


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def split_lines(text: str) -> List[str]:
    """
    Split on LF only; form feeds and other separators stay inside the line.

    A trailing CR is stripped and a final newline does not add an empty line.
    """
    if not text:
        return []
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines[-1] == "":
        lines.pop()
    return lines


def analyze_text(
    content: Union[str, bytes, None],
    detection: Optional[DetectionConfig] = None,
    store: Optional[AlertStore] = None,
    notifier: Optional[Notifier] = None,
    recipient: Optional[str] = None,
) -> AnalysisResult:
    """
    Analyze one log blob and emit an alert per IP with a burst.

    Raises MissingInputError if content is None. Bad lines and sink
    failures never fail the run.
    """
    if content is None:
        raise MissingInputError("No log content supplied")
    detection = detection or default_config()

    lines = split_lines(_decode(content))
    events = extract_events(lines, detection.reference_year, detection.rules)
    timelines = build_timelines(events)
    alerts = find_bursts(timelines, detection)

    logger.log_info(
        "Parsed log content",
        lines=len(lines),
        events=len(events),
        addresses=len(timelines),
        alerts=len(alerts),
    )

    stored = emit_alerts(alerts, store=store, notifier=notifier, recipient=recipient)
    return AnalysisResult(
        total_lines=len(lines),
        preview=lines[: config.PREVIEW_LINES],
        alerts=alerts,
        events=len(events),
        stored=stored,
    )


def analyze_file(
    path: Union[str, Path],
    detection: Optional[DetectionConfig] = None,
    store: Optional[AlertStore] = None,
    notifier: Optional[Notifier] = None,
    recipient: Optional[str] = None,
) -> AnalysisResult:
    """Read a log file from disk and analyze it."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    with open(path, "rb") as f:
        content = f.read()
    logger.log_info("Analyzing log file", path=str(path), size=len(content))
    return analyze_text(
        content,
        detection=detection,
        store=store,
        notifier=notifier,
        recipient=recipient,
    )
