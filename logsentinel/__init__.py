"""
LogSentinel - brute force burst detection for auth logs.

This package provides:
- log_parser: Extract failed-login events from syslog-style lines
- detector: Per-IP timelines and sliding-window burst detection
- alerts: Hand detected bursts to storage and notification
- analysis: One analysis run over one log file
- store: JSON Lines alert storage with IP / date queries
- notifier: Email alerts (SMTP) or dry-run logging
- watcher: Analyze log files dropped into a folder
- logger: JSON logging for SIEM
- config: Central configuration
"""

__version__ = "1.0.0"

from .analysis import AnalysisResult, MissingInputError, analyze_file, analyze_text
from .detector import BurstAlert, DetectionConfig, build_timelines, default_config, detect_burst, find_bursts
from .log_parser import AuthEvent, extract_events

__all__ = [
    "AnalysisResult",
    "AuthEvent",
    "BurstAlert",
    "DetectionConfig",
    "MissingInputError",
    "analyze_file",
    "analyze_text",
    "build_timelines",
    "default_config",
    "detect_burst",
    "extract_events",
    "find_bursts",
]
