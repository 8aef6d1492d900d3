"""
Admin API: grant, block, unblock, list installations. Every route requires the admin bearer token.
"""
from flask import Blueprint, current_app, jsonify, request

from errors import InvalidArgument
from middleware.admin_auth import require_admin
from middleware.validate_request import clamp_int, validate_machine_request
from services import installation_service

blueprint = Blueprint("admin", __name__)

DEFAULT_LIST_LIMIT = 200
MAX_LIST_LIMIT = 500
MAX_OFFSET = 1_000_000


@blueprint.before_request
def check_admin_token():
    err, status = require_admin()
    if err is not None:
        return err, status
    return None


def _store():
    return current_app.extensions["installations"]


def _now():
    return current_app.extensions["clock"]()


def _audit(action, machine_id, payload):
    current_app.extensions["audit"].record(request, action, "installation", machine_id, payload, _now())


def _parse_days(value):
    """JSON numbers pass through; numeric strings are accepted the way a form field would be."""
    if value is None:
        return current_app.config["GRANT_DEFAULT_DAYS"]
    if isinstance(value, str):
        try:
            return float(value) if value.strip() else None
        except ValueError:
            raise InvalidArgument("invalid_days", f"days is not a number: {value!r}") from None
    return value


@blueprint.post("/grant")
def grant():
    err, status = validate_machine_request()
    if err is not None:
        return err, status
    data = request.get_json()
    machine_id = installation_service.normalize_machine_id(str(data["machine_id"]))
    days = _parse_days(data.get("days"))
    expires_at = installation_service.grant(_store(), machine_id, days, _now(), notes=data.get("notes"))
    _audit("grant", machine_id, {"days": days, "expires_at": expires_at})
    return jsonify(ok=True, machine_id=machine_id, expires_at=expires_at)


def _set_blocked(blocked):
    err, status = validate_machine_request()
    if err is not None:
        return err, status
    machine_id = installation_service.normalize_machine_id(str(request.get_json()["machine_id"]))
    installation_service.set_blocked(_store(), machine_id, blocked, _now())
    _audit("block" if blocked else "unblock", machine_id, {})
    return jsonify(ok=True, machine_id=machine_id, blocked=blocked)


@blueprint.post("/block")
def block():
    return _set_blocked(True)


@blueprint.post("/unblock")
def unblock():
    return _set_blocked(False)


@blueprint.get("/installs")
def installs():
    limit = clamp_int(request.args.get("limit"), 1, MAX_LIST_LIMIT, DEFAULT_LIST_LIMIT)
    offset = clamp_int(request.args.get("offset"), 0, MAX_OFFSET, 0)
    items = installation_service.list_installations(_store(), limit, offset, _now())
    return jsonify(ok=True, items=items)
