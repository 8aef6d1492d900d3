"""
Shared fixtures: in-memory stores that follow the same upsert rules as the MySQL statements,
a settable clock, and a Flask test client wired to them. No database required.
"""
from datetime import datetime, timezone

import pytest

from index import create_app

ADMIN_TOKEN = "test-admin-token"


class FakeInstallationStore:
    """Dict-backed stand-in for services.installation_service.InstallationStore."""

    def __init__(self):
        self.rows = {}

    def find(self, machine_id):
        row = self.rows.get(machine_id)
        return dict(row) if row else None

    def _insert(self, machine_id, now_str, **fields):
        row = {
            "machine_id": machine_id,
            "first_seen_at": now_str,
            "last_seen_at": now_str,
            "activated": 0,
            "blocked": 0,
            "expires_at": None,
            "notes": None,
        }
        row.update(fields)
        self.rows[machine_id] = row

    def touch(self, machine_id, now_str):
        if machine_id in self.rows:
            self.rows[machine_id]["last_seen_at"] = now_str
        else:
            self._insert(machine_id, now_str)

    def upsert_grant(self, machine_id, now_str, expires_at, notes):
        row = self.rows.get(machine_id)
        if row is None:
            self._insert(machine_id, now_str, activated=1, expires_at=expires_at, notes=notes)
            return
        row.update(activated=1, blocked=0, expires_at=expires_at, last_seen_at=now_str)
        if notes is not None:
            row["notes"] = notes

    def upsert_blocked(self, machine_id, blocked, now_str):
        row = self.rows.get(machine_id)
        if row is None:
            self._insert(machine_id, now_str, blocked=1 if blocked else 0)
            return
        row.update(blocked=1 if blocked else 0, last_seen_at=now_str)

    def list(self, limit, offset):
        rows = sorted(self.rows.values(), key=lambda r: r["last_seen_at"], reverse=True)
        return [dict(r) for r in rows[offset:offset + limit]]


class FakeCommentStore:
    def __init__(self):
        self.rows = {}
        self.next_id = 1

    def list(self, limit, offset):
        rows = sorted(self.rows.values(), key=lambda r: r["id"], reverse=True)
        return [dict(r) for r in rows[offset:offset + limit]]

    def get(self, comment_id):
        row = self.rows.get(comment_id)
        return dict(row) if row else None

    def create(self, author, content, created_at):
        comment_id = self.next_id
        self.next_id += 1
        self.rows[comment_id] = {"id": comment_id, "author": author, "content": content, "created_at": created_at}
        return comment_id

    def delete(self, comment_id):
        return 1 if self.rows.pop(comment_id, None) else 0


class FakeAuditLog:
    def __init__(self):
        self.entries = []

    def record(self, request, action, entity_type, entity_id, payload, now):
        self.entries.append((action, entity_type, entity_id, payload, now))


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def now():
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return FakeInstallationStore()


@pytest.fixture
def comment_store():
    return FakeCommentStore()


@pytest.fixture
def audit_log():
    return FakeAuditLog()


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def app(store, comment_store, audit_log, clock):
    app = create_app(
        database=object(),
        installations=store,
        comments=comment_store,
        audit=audit_log,
        clock=clock,
        settings={"ADMIN_TOKEN": ADMIN_TOKEN, "CORS_ALLOW_ORIGIN": "*", "GRANT_DEFAULT_DAYS": 365},
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
