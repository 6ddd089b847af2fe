"""
Brute force burst detection.

Failed logins are grouped per source IP and sorted by time. An IP is
flagged when `threshold` consecutive attempts fit inside
`max_window_seconds`. Only the earliest qualifying window is reported,
so each IP yields at most one alert per run.

Because the timeline is sorted, checking a window only needs its first
and last timestamp: the scan is a fixed-offset two-pointer pass, O(n)
per IP.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from . import config
from .log_parser import RULES, AuthEvent


@dataclass(frozen=True)
class DetectionConfig:
    """
    Read-only settings shared by every analysis run.

    Built once (see default_config) and passed into each run; never mutated.
    """

    threshold: int = config.FAILED_ATTEMPTS_THRESHOLD
    max_window_seconds: float = float(config.DETECTION_WINDOW_SECONDS)
    reference_year: int = field(default_factory=lambda: datetime.now().year)
    rules: Tuple[Tuple[str, Pattern], ...] = RULES

    def __post_init__(self):
        if self.threshold < 1:
            raise ValueError(f"threshold must be at least 1, got {self.threshold}")
        if self.max_window_seconds < 0:
            raise ValueError(
                f"max_window_seconds must not be negative, got {self.max_window_seconds}"
            )


def default_config(
    threshold: Optional[int] = None,
    max_window_seconds: Optional[float] = None,
    reference_year: Optional[int] = None,
) -> DetectionConfig:
    """Build the detection config from module settings, with optional overrides."""
    if reference_year is None and config.REFERENCE_YEAR:
        reference_year = int(config.REFERENCE_YEAR)
    kwargs = {}
    if threshold is not None:
        kwargs["threshold"] = threshold
    if max_window_seconds is not None:
        kwargs["max_window_seconds"] = float(max_window_seconds)
    if reference_year is not None:
        kwargs["reference_year"] = reference_year
    return DetectionConfig(**kwargs)


@dataclass(frozen=True)
class BurstAlert:
    """One detected burst for one IP."""

    source_address: str
    attempt_count: int      # all failed attempts seen for the IP, not just the window
    window_seconds: float   # span of the earliest qualifying window
    detected_at: datetime

    def to_record(self) -> dict:
        """Persistable shape of the alert."""
        return {
            "ip": self.source_address,
            "attempt_count": self.attempt_count,
            "window_seconds": round(self.window_seconds, 2),
            "detected_at": self.detected_at.isoformat(),
        }


def build_timelines(events: Iterable[AuthEvent]) -> Dict[str, List[datetime]]:
    """
    Group events by source IP, then sort each IP's timestamps ascending.

    Keys keep the order in which IPs first appear in the input.
    """
    timelines: Dict[str, List[datetime]] = {}
    for event in events:
        timelines.setdefault(event.source_address, []).append(event.occurred_at)
    for timestamps in timelines.values():
        timestamps.sort()
    return timelines


def detect_burst(
    address: str,
    timestamps: Sequence[datetime],
    detection: DetectionConfig,
    now: Optional[datetime] = None,
) -> Optional[BurstAlert]:
    """
    Return an alert for the first window of `threshold` attempts that spans
    at most `max_window_seconds`, or None.

    `timestamps` must already be sorted ascending.
    """
    threshold = detection.threshold
    n = len(timestamps)
    for i in range(n - threshold + 1):
        span = (timestamps[i + threshold - 1] - timestamps[i]).total_seconds()
        if span <= detection.max_window_seconds:
            return BurstAlert(
                source_address=address,
                attempt_count=n,
                window_seconds=span,
                detected_at=now or datetime.now(),
            )
    return None


def find_bursts(
    timelines: Dict[str, Sequence[datetime]],
    detection: DetectionConfig,
    now: Optional[datetime] = None,
) -> List[BurstAlert]:
    """Run detect_burst for every IP; at most one alert per IP."""
    alerts = []
    for address, timestamps in timelines.items():
        alert = detect_burst(address, timestamps, detection, now=now)
        if alert is not None:
            alerts.append(alert)
    return alerts
