"""
Clock parsing, paging helpers, audit trail and schema splitting.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from middleware.validate_request import clamp_int
from services.audit_service import AuditLog, get_client_ip
from services.clock import format_timestamp, parse_timestamp
from setup_db import SCHEMA_PATH, split_statements


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-31T00:00:00Z", datetime(2025, 1, 31, tzinfo=timezone.utc)),
        ("2025-01-31T00:00:00.000Z", datetime(2025, 1, 31, tzinfo=timezone.utc)),
        ("2025-01-31T02:00:00+02:00", datetime(2025, 1, 31, tzinfo=timezone.utc)),
        (datetime(2025, 1, 31), datetime(2025, 1, 31, tzinfo=timezone.utc)),
        ("garbage", None),
        ("9999-12-31T23:59:59-05:00", None),
        ("0001-01-01T00:00:00+01:00", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


def test_format_timestamp_normalises_to_utc_seconds():
    dt = datetime(2025, 1, 1, 3, 0, 0, 123456, tzinfo=timezone(timedelta(hours=3)))
    assert format_timestamp(dt) == "2025-01-01T00:00:00Z"


@pytest.mark.parametrize(
    "value, expected",
    [(None, 7), ("abc", 7), ("inf", 7), ("5", 5), ("5.9", 5), ("-3", 0), ("9999", 100)],
)
def test_clamp_int(value, expected):
    assert clamp_int(value, 0, 100, 7) == expected


def test_client_ip_prefers_forwarded_header():
    request = MagicMock()
    request.headers = {"X-Forwarded-For": "10.0.0.1, 10.0.0.2"}
    assert get_client_ip(request) == "10.0.0.1"
    request.headers = {}
    request.remote_addr = "127.0.0.1"
    assert get_client_ip(request) == "127.0.0.1"


def test_audit_write_failure_does_not_raise(caplog):
    db = MagicMock()
    db.execute.side_effect = RuntimeError("db down")
    request = MagicMock(headers={}, remote_addr="127.0.0.1")
    AuditLog(db).record(request, "grant", "installation", "m1", {"days": 30}, datetime(2025, 1, 1, tzinfo=timezone.utc))
    assert "failed to write audit_log" in caplog.text


def test_audit_writes_payload_as_json():
    db = MagicMock()
    request = MagicMock(headers={}, remote_addr="127.0.0.1")
    AuditLog(db).record(request, "block", "installation", "m1", {"reason": "abuse"}, datetime(2030, 6, 1, 12, 30, tzinfo=timezone.utc))
    assert db.execute.call_args.args[1] == (
        "block", "installation", "m1", '{"reason": "abuse"}', "127.0.0.1", "2030-06-01T12:30:00Z",
    )


def test_schema_statements():
    statements = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))
    assert len(statements) == 3
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS installations")
    assert split_statements("-- a; b\nSELECT 1;\n\n") == ["SELECT 1"]
