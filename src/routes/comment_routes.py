"""
Comments API: list, get, create, delete.
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from middleware.validate_request import clamp_int
from services import comment_service

logger = logging.getLogger(__name__)

blueprint = Blueprint("comments", __name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200
MAX_OFFSET = 1_000_000


def _store():
    return current_app.extensions["comments"]


@blueprint.get("")
def list_comments():
    limit = clamp_int(request.args.get("limit"), 1, MAX_LIST_LIMIT, DEFAULT_LIST_LIMIT)
    offset = clamp_int(request.args.get("offset"), 0, MAX_OFFSET, 0)
    return jsonify(ok=True, items=_store().list(limit, offset))


@blueprint.get("/<int:comment_id>")
def get_comment(comment_id):
    row = _store().get(comment_id)
    if not row:
        return jsonify(ok=False, error="not_found"), 404
    return jsonify(ok=True, item=row)


@blueprint.post("")
def create_comment():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify(ok=False, error="invalid_json"), 400
    if not isinstance(data, dict):
        # arrays and scalars carry no fields; validation reports the first missing one
        data = {}
    comment_id = comment_service.create_comment(_store(), data, current_app.extensions["clock"]())
    logger.info("comment created: id=%s", comment_id)
    return jsonify(ok=True, id=comment_id), 201


@blueprint.delete("/<int:comment_id>")
def delete_comment(comment_id):
    if not _store().delete(comment_id):
        return jsonify(ok=False, error="not_found"), 404
    return jsonify(ok=True)
