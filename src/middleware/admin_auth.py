"""
Static bearer-token check for /admin/* routes.
"""
import hmac

from flask import current_app, jsonify, request


def require_admin():
    """Return (None, None) if the Authorization header carries the admin token, else (response, status)."""
    token = current_app.config.get("ADMIN_TOKEN")
    if not token:
        return jsonify(ok=False, error="ADMIN_TOKEN_missing"), 500
    auth = request.headers.get("Authorization", "")
    if not hmac.compare_digest(auth.encode(), f"Bearer {token}".encode()):
        return jsonify(ok=False, error="unauthorized"), 401
    return None, None
