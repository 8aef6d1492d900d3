"""
Basic request validation: ensure JSON body and required fields, and parse paging parameters.
Only structural checks; the services re-validate values they depend on.
"""
import math

from flask import jsonify, request


def validate_body(required_fields):
    """Return (None, None) if valid, else (response, status_code)."""

    if not request.is_json:
        return jsonify(ok=False, error="invalid_json"), 400
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify(ok=False, error="invalid_json"), 400
    for field in required_fields:
        value = data.get(field)
        if value is None or not str(value).strip():
            return jsonify(ok=False, error=f"{field}_required"), 400
    return None, None


def validate_machine_request():
    """Use for POST routes keyed by machine_id. Returns (None, None) or (error_response, status)."""
    return validate_body(("machine_id",))


def validate_machine_query():
    """Use for GET /activation_status. Returns (None, None) or (error_response, status)."""
    if not request.args.get("machine_id", "").strip():
        return jsonify(ok=False, error="machine_id_required"), 400
    return None, None


def clamp_int(value, lo, hi, fallback):
    """Parse a query-string integer, clamped to [lo, hi]; fallback if missing or not a number."""
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(n):
        return fallback
    return max(lo, min(hi, math.floor(n)))
