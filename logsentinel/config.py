"""
Central configuration for LogSentinel.

All tunable parameters live here so thresholds, paths, and mail settings
can be adjusted without touching the detection code. Deploy-time values
(credentials, recipients, alert file location) come from the environment,
with a .env file at the project root (or LOGSENTINEL_ENV_FILE) filling in
anything not already set.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE = Path(
    os.environ.get("LOGSENTINEL_ENV_FILE", Path(__file__).resolve().parent.parent / ".env")
)
load_dotenv(ENV_FILE)

# ---------------------------------------------------------------------------
# DETECTION THRESHOLDS
# ---------------------------------------------------------------------------
# How many failed logins from one address make a burst?
FAILED_ATTEMPTS_THRESHOLD = 5

# Maximum span (seconds) between the first and last attempt of a burst.
DETECTION_WINDOW_SECONDS = 60

# Syslog timestamps carry no year. Unset means "current year".
REFERENCE_YEAR = os.environ.get("LOGSENTINEL_REFERENCE_YEAR")

# ---------------------------------------------------------------------------
# RUN RESULT
# ---------------------------------------------------------------------------
# Number of raw lines echoed back in the analysis preview.
PREVIEW_LINES = 10

# ---------------------------------------------------------------------------
# PATHS
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SAMPLE_LOG_PATH = PROJECT_ROOT / "logs" / "sample_auth.log"

OUTPUT_DIR = PROJECT_ROOT / "output"
ALERTS_FILE = Path(os.environ.get("LOGSENTINEL_ALERTS_FILE", OUTPUT_DIR / "alerts.jsonl"))

# Folder polled by the watcher for newly dropped log files.
WATCH_DIR = PROJECT_ROOT / "watched-logs"
POLL_INTERVAL_SECONDS = 2.0

# ---------------------------------------------------------------------------
# NOTIFICATIONS
# ---------------------------------------------------------------------------
# SMTP over SSL. Gmail needs an app password, not the account password.
SMTP_HOST = os.environ.get("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.environ.get("SMTP_PORT", "465"))
SMTP_TIMEOUT_SECONDS = 10
EMAIL_USER = os.environ.get("EMAIL_USER", "")
EMAIL_PASS = os.environ.get("EMAIL_PASS", "")
EMAIL_SENDER_NAME = "LogSentinel"

# Fallback recipient when the caller does not supply one.
EMAIL_TO = os.environ.get("EMAIL_TO", "")

# ---------------------------------------------------------------------------
# LOGGING
# ---------------------------------------------------------------------------
# DEBUG, INFO, WARN or ERROR.
LOG_LEVEL = os.environ.get("LOGSENTINEL_LOG_LEVEL", "INFO").upper()
