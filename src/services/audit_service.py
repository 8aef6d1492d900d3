"""
Optional audit logging for admin actions. Writes to audit_log table for compliance/debugging.
Failures are logged but do not fail the request.
"""
import json
import logging

from services.clock import format_timestamp

logger = logging.getLogger(__name__)


def get_client_ip(request):
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.remote_addr or None


class AuditLog:
    def __init__(self, database):
        self.db = database

    def record(self, request, action, entity_type, entity_id, payload, now):
        client_ip = get_client_ip(request)
        payload_str = json.dumps(payload) if payload else None
        try:
            self.db.execute(
                "INSERT INTO audit_log (action, entity_type, entity_id, payload, client_ip, created_at) VALUES (%s, %s, %s, %s, %s, %s)",
                (action, entity_type or None, entity_id or None, payload_str, client_ip, format_timestamp(now)),
            )
        except Exception as e:
            logger.exception("audit: failed to write audit_log: %s", e)
