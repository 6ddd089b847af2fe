"""
Auth log parser: turns syslog-style lines into failed-login events.

We use REGEX rules to extract:
- Timestamp fragment ("Jan 30 10:15:23")
- Source IP (dotted quad)

Rules are tried in a fixed order and the first match wins, so a line that
mentions both "Failed password" and "unauthorized" is counted once.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple

from . import logger


@dataclass(frozen=True)
class AuthEvent:
    """One failed authentication attempt attributed to a source address."""

    source_address: str
    occurred_at: datetime
    rule: str = ""


# ---------------------------------------------------------------------------
# REGEX RULES
# ---------------------------------------------------------------------------
# Examples of lines each rule recognizes:
#   Jan 30 10:15:23 host sshd[1234]: Failed password for root from 192.168.1.100 port 22 ssh2
#   Jan 30 10:15:23 host sshd[1234]: pam_unix(sshd:auth): authentication failure; logname= uid=0 euid=0 tty=ssh ruser= rhost=192.168.1.100
#   Jan 30 10:15:23 host app[77]: Unauthorized access attempt from 192.168.1.100
#   Jan 30 10:15:23 host sshd[1234]: Login timeout for root from 192.168.1.100

TIMESTAMP = r"(?P<timestamp>[A-Za-z]{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})"
IPV4 = r"(?P<ip>\d{1,3}(?:\.\d{1,3}){3})(?!\d)"

PASSWORD_FAILURE = re.compile(TIMESTAMP + r".*Failed password.*from\s+" + IPV4, re.IGNORECASE)

AUTHENTICATION_FAILURE = re.compile(
    TIMESTAMP + r".*authentication failure.*rhost=" + IPV4, re.IGNORECASE
)

UNAUTHORIZED = re.compile(TIMESTAMP + r".*unauthorized.*from\s+" + IPV4, re.IGNORECASE)

LOGIN_TIMEOUT = re.compile(TIMESTAMP + r".*login timeout.*from\s+" + IPV4, re.IGNORECASE)

# Order matters: first matching rule wins.
RULES: Tuple[Tuple[str, Pattern], ...] = (
    ("password_failure", PASSWORD_FAILURE),
    ("authentication_failure", AUTHENTICATION_FAILURE),
    ("unauthorized", UNAUTHORIZED),
    ("login_timeout", LOGIN_TIMEOUT),
)


def parse_timestamp(fragment: str, year: int) -> datetime:
    """
    Combine a syslog fragment ("Jan  5 10:15:23") with a year.

    Raises ValueError for fragments that are not real dates (e.g. "Feb 30").
    """
    normalized = " ".join(fragment.split())
    return datetime.strptime(f"{year} {normalized}", "%Y %b %d %H:%M:%S")


def parse_line(
    line: str,
    year: int,
    rules: Sequence[Tuple[str, Pattern]] = RULES,
) -> Optional[AuthEvent]:
    """
    Parse one log line into an AuthEvent if any rule matches.

    Returns None if no rule matches. Raises ValueError when the matching
    rule captured a timestamp that cannot be parsed.
    """
    for name, pattern in rules:
        match = pattern.search(line)
        if match:
            return AuthEvent(
                source_address=match.group("ip"),
                occurred_at=parse_timestamp(match.group("timestamp"), year),
                rule=name,
            )
    return None


def iter_events(
    lines: Iterable[str],
    year: int,
    rules: Sequence[Tuple[str, Pattern]] = RULES,
) -> Iterator[AuthEvent]:
    """Yield events in input order; bad timestamps skip the line."""
    for line_number, line in enumerate(lines, 1):
        try:
            event = parse_line(line, year, rules)
        except ValueError as e:
            logger.log_warn(
                "Skipping line with unparseable timestamp",
                line_number=line_number,
                error=str(e),
            )
            continue
        if event is None:
            logger.log_debug("Line matched no rule", line_number=line_number)
            continue
        yield event


def extract_events(
    lines: Iterable[str],
    year: int,
    rules: Sequence[Tuple[str, Pattern]] = RULES,
) -> List[AuthEvent]:
    """Parse all failed-login events from lines, preserving line order."""
    return list(iter_events(lines, year, rules))
