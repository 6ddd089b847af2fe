import io
import json
from datetime import datetime

import pytest

from logsentinel import config, logger
from logsentinel.log_parser import extract_events, parse_line, parse_timestamp


@pytest.fixture
def log_stream(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(config, "LOG_LEVEL", "INFO")
    monkeypatch.setattr(logger, "LOG_STREAM", stream)
    return stream


def test_parse_failed_password():
    line = "Jan 30 10:15:23 host sshd[1234]: Failed password for root from 192.168.1.100 port 22 ssh2"
    event = parse_line(line, 2024)
    assert event.source_address == "192.168.1.100"
    assert event.occurred_at == datetime(2024, 1, 30, 10, 15, 23)
    assert event.rule == "password_failure"


def test_parse_each_failure_style():
    lines = [
        "Mar 3 08:00:01 host sshd[9]: Failed password for invalid user admin from 10.0.0.1 port 4 ssh2",
        "Mar 3 08:00:02 host sshd[9]: pam_unix(sshd:auth): authentication failure; uid=0 rhost=10.0.0.2  user=bob",
        "Mar 3 08:00:03 host portal[7]: Unauthorized access attempt from 10.0.0.3",
        "Mar 3 08:00:04 host sshd[9]: Login timeout for root from 10.0.0.4",
    ]
    events = extract_events(lines, 2024)
    assert [e.source_address for e in events] == ["10.0.0.1", "10.0.0.2", "10.0.0.3", "10.0.0.4"]
    assert [e.rule for e in events] == [
        "password_failure",
        "authentication_failure",
        "unauthorized",
        "login_timeout",
    ]


def test_first_matching_rule_wins():
    line = "Jan 30 10:15:23 host app[1]: unauthorized login timeout from 10.0.0.9"
    event = parse_line(line, 2024)
    assert event.rule == "unauthorized"

    line = "Jan 30 10:15:23 host sshd[1]: Failed password (unauthorized) for root from 10.0.0.9 port 22"
    events = extract_events([line], 2024)
    assert len(events) == 1
    assert events[0].rule == "password_failure"


def test_matching_is_case_insensitive():
    line = "Jan 30 10:15:23 host sshd[1]: FAILED PASSWORD for root FROM 10.0.0.9"
    assert parse_line(line, 2024).source_address == "10.0.0.9"


def test_unmatched_lines_are_dropped():
    lines = [
        "Jan 30 10:14:02 host sshd[1]: Accepted password for admin from 192.168.1.50 port 5 ssh2",
        "",
        "garbage",
        "Failed password for root from 10.0.0.1",  # no timestamp
    ]
    assert extract_events(lines, 2024) == []


def test_single_digit_day_with_padding():
    line = "Feb  3 07:08:09 host sshd[1]: Failed password for root from 10.1.2.3 port 22 ssh2"
    assert parse_line(line, 2024).occurred_at == datetime(2024, 2, 3, 7, 8, 9)


def test_reference_year_is_applied():
    assert parse_timestamp("Dec 31 23:59:59", 2019) == datetime(2019, 12, 31, 23, 59, 59)
    assert parse_timestamp("Feb 29 12:00:00", 2024) == datetime(2024, 2, 29, 12, 0, 0)


def test_bad_timestamp_skips_line(log_stream):
    lines = [
        "Feb 29 12:00:00 host sshd[1]: Failed password for root from 10.0.0.1 port 22 ssh2",
        "Feb 28 12:00:00 host sshd[1]: Failed password for root from 10.0.0.2 port 22 ssh2",
        "Xyz 10 12:00:00 host sshd[1]: Failed password for root from 10.0.0.3 port 22 ssh2",
    ]
    events = extract_events(lines, 2023)
    assert [e.source_address for e in events] == ["10.0.0.2"]

    warnings = [json.loads(l) for l in log_stream.getvalue().splitlines()]
    assert [w["line_number"] for w in warnings] == [1, 3]
    assert all(w["level"] == "WARN" for w in warnings)


def test_events_keep_input_order():
    lines = [
        "Jan 30 10:00:05 host sshd[1]: Failed password for root from 10.0.0.2 port 22 ssh2",
        "Jan 30 10:00:01 host sshd[1]: Failed password for root from 10.0.0.1 port 22 ssh2",
        "Jan 30 10:00:03 host sshd[1]: Failed password for root from 10.0.0.2 port 22 ssh2",
    ]
    events = extract_events(lines, 2024)
    assert [e.occurred_at.second for e in events] == [5, 1, 3]


def test_address_must_end_at_last_octet():
    line = "Jan 30 10:15:23 host sshd[1]: Failed password for root from 10.0.0.1234 port 22 ssh2"
    assert parse_line(line, 2024) is None
    line = "Jan 30 10:15:23 host sshd[1]: authentication failure; uid=0 rhost=10.0.0.12"
    assert parse_line(line, 2024).source_address == "10.0.0.12"


def test_dropped_lines_logged_at_debug(monkeypatch, log_stream):
    lines = [
        "Jan 30 10:14:02 host sshd[1]: Accepted password for admin from 192.168.1.50 port 5 ssh2",
        "Jan 30 10:15:23 host sshd[1]: Failed password for root from 10.0.0.1 port 22 ssh2",
    ]
    extract_events(lines, 2024)
    assert log_stream.getvalue() == ""

    monkeypatch.setattr(config, "LOG_LEVEL", "DEBUG")
    extract_events(lines, 2024)
    entries = [json.loads(l) for l in log_stream.getvalue().splitlines()]
    assert [(e["level"], e["line_number"]) for e in entries] == [("DEBUG", 1)]
