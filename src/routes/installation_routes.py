"""
Installation API: register an install and query its activation status.
"""
from flask import Blueprint, current_app, jsonify, request

from middleware.validate_request import validate_machine_query, validate_machine_request
from services import installation_service

blueprint = Blueprint("installations", __name__)


def _store():
    return current_app.extensions["installations"]


def _now():
    return current_app.extensions["clock"]()


@blueprint.post("/register_install")
def register_install():
    err, status = validate_machine_request()
    if err is not None:
        return err, status
    machine_id = str(request.get_json()["machine_id"])
    installation_service.register_or_touch(_store(), machine_id, _now())
    return jsonify(ok=True)


@blueprint.get("/activation_status")
def activation_status():
    err, status = validate_machine_query()
    if err is not None:
        return err, status
    state = installation_service.check_status(_store(), request.args["machine_id"], _now())
    return jsonify(ok=True, **state.to_dict())
