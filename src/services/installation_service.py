"""
Installation registration, activation status and admin grant/block.

evaluate() is pure: it decides the visible state from an already-fetched row and a timestamp.
Every write goes through a single INSERT ... ON DUPLICATE KEY UPDATE so concurrent requests for
the same machine_id never race between a read and a write.
"""
import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from errors import InvalidArgument
from services.clock import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

MIN_GRANT_DAYS = 1
MAX_GRANT_DAYS = 3650
MAX_MACHINE_ID_LENGTH = 255
MAX_NOTES_LENGTH = 500

_COLUMNS = "machine_id, first_seen_at, last_seen_at, activated, blocked, expires_at, notes"


class Reason(str, Enum):
    NOT_REGISTERED = "NOT_REGISTERED"
    NOT_ACTIVATED = "NOT_ACTIVATED"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"
    OK = "OK"


@dataclass(frozen=True)
class StateResult:
    activated: bool
    blocked: bool
    expires_at: object
    reason: Reason

    def to_dict(self):
        return {
            "activated": self.activated,
            "blocked": self.blocked,
            "expires_at": self.expires_at,
            "reason": self.reason.value,
        }


class InstallationStore:
    """Data access for the installations table. Wraps a db.Database."""

    def __init__(self, database):
        self.db = database

    def find(self, machine_id):
        return self.db.query_one(
            f"SELECT {_COLUMNS} FROM installations WHERE machine_id = %s LIMIT 1",
            (machine_id,),
        )

    def touch(self, machine_id, now_str):
        self.db.execute(
            """
            INSERT INTO installations (machine_id, first_seen_at, last_seen_at, activated, blocked)
            VALUES (%s, %s, %s, 0, 0)
            ON DUPLICATE KEY UPDATE
              last_seen_at = VALUES(last_seen_at)
            """,
            (machine_id, now_str, now_str),
        )

    def upsert_grant(self, machine_id, now_str, expires_at, notes):
        self.db.execute(
            """
            INSERT INTO installations (machine_id, first_seen_at, last_seen_at, activated, blocked, expires_at, notes)
            VALUES (%s, %s, %s, 1, 0, %s, %s)
            ON DUPLICATE KEY UPDATE
              activated = 1,
              blocked = 0,
              expires_at = VALUES(expires_at),
              notes = COALESCE(VALUES(notes), installations.notes),
              last_seen_at = VALUES(last_seen_at)
            """,
            (machine_id, now_str, now_str, expires_at, notes),
        )

    def upsert_blocked(self, machine_id, blocked, now_str):
        self.db.execute(
            """
            INSERT INTO installations (machine_id, first_seen_at, last_seen_at, activated, blocked)
            VALUES (%s, %s, %s, 0, %s)
            ON DUPLICATE KEY UPDATE
              blocked = VALUES(blocked),
              last_seen_at = VALUES(last_seen_at)
            """,
            (machine_id, now_str, now_str, 1 if blocked else 0),
        )

    def list(self, limit, offset):
        return self.db.query(
            f"SELECT {_COLUMNS} FROM installations ORDER BY last_seen_at DESC LIMIT %s OFFSET %s",
            (limit, offset),
        )


def normalize_machine_id(machine_id):
    """Strip and check a client-supplied machine id. Raises InvalidArgument if empty or too long."""
    if machine_id is None or not isinstance(machine_id, str):
        raise InvalidArgument("machine_id_required", "machine_id must be a non-empty string")
    machine_id = machine_id.strip()
    if not machine_id:
        raise InvalidArgument("machine_id_required", "machine_id must be a non-empty string")
    if len(machine_id) > MAX_MACHINE_ID_LENGTH:
        raise InvalidArgument("machine_id_too_long", f"machine_id exceeds {MAX_MACHINE_ID_LENGTH} characters")
    return machine_id


def _validate_days(days):
    if isinstance(days, bool) or not isinstance(days, (int, float)) or not math.isfinite(days):
        raise InvalidArgument("invalid_days", "days must be a number")
    if days < MIN_GRANT_DAYS or days > MAX_GRANT_DAYS:
        raise InvalidArgument("invalid_days", f"days must be between {MIN_GRANT_DAYS} and {MAX_GRANT_DAYS}")
    return days


def is_expired(expires_at, now):
    """True if expires_at is set and before now. Unparsable values count as not expired."""
    if not expires_at:
        return False
    expiry = parse_timestamp(expires_at)
    if expiry is None:
        logger.warning("unparsable expires_at %r treated as not expired", expires_at)
        return False
    return expiry < parse_timestamp(now)


def evaluate(record, now):
    """Derive the visible activation state from a stored row (or None when not found)."""
    if record is None:
        return StateResult(activated=False, blocked=False, expires_at=None, reason=Reason.NOT_REGISTERED)

    expires_at = record.get("expires_at")
    blocked = bool(record.get("blocked"))
    expired = is_expired(expires_at, now)

    if blocked:
        reason = Reason.BLOCKED
    elif expired:
        reason = Reason.EXPIRED
    elif record.get("activated"):
        reason = Reason.OK
    else:
        reason = Reason.NOT_ACTIVATED

    if isinstance(expires_at, str) or expires_at is None:
        shown_expiry = expires_at or None
    else:
        shown_expiry = format_timestamp(expires_at)
    return StateResult(activated=reason is Reason.OK, blocked=blocked, expires_at=shown_expiry, reason=reason)


def register_or_touch(store, machine_id, now):
    """Create the record on first sight; afterwards only last_seen_at moves."""
    machine_id = normalize_machine_id(machine_id)
    store.touch(machine_id, format_timestamp(now))


def check_status(store, machine_id, now):
    """Evaluate the stored record, then register/touch it. The result reflects the row before the touch."""
    machine_id = normalize_machine_id(machine_id)
    record = store.find(machine_id)
    store.touch(machine_id, format_timestamp(now))
    return evaluate(record, now)


def grant(store, machine_id, days, now, notes=None):
    """Activate machine_id for `days` days from now, clearing any block. Returns the new expires_at."""
    machine_id = normalize_machine_id(machine_id)
    days = _validate_days(days)
    expires_at = format_timestamp(now + timedelta(seconds=days * 86400))
    if notes is not None:
        notes = str(notes)[:MAX_NOTES_LENGTH]
    store.upsert_grant(machine_id, format_timestamp(now), expires_at, notes)
    logger.info("grant: machine_id=%s days=%s expires_at=%s", machine_id, days, expires_at)
    return expires_at


def set_blocked(store, machine_id, blocked, now):
    """Set or clear the blocked flag. Creates the record with defaults if it does not exist yet."""
    machine_id = normalize_machine_id(machine_id)
    store.upsert_blocked(machine_id, bool(blocked), format_timestamp(now))
    logger.info("%s: machine_id=%s", "block" if blocked else "unblock", machine_id)


def list_installations(store, limit, offset, now):
    """One page of installations, most recently seen first, each with its evaluated reason."""
    items = []
    for row in store.list(limit, offset):
        state = evaluate(row, now)
        item = dict(row)
        item["activated"] = bool(row.get("activated"))
        item["blocked"] = state.blocked
        item["expires_at"] = state.expires_at
        item["reason"] = state.reason.value
        items.append(item)
    return items
