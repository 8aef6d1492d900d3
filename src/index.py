"""
Licensing server entry point. REST API; run behind HTTPS in production.
Uses local MySQL database (default: licensing). Run from project root: python src/index.py
"""
import logging
import sys

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

import config
from db import Database
from errors import InvalidArgument, StorageUnavailable
from middleware import cors
from routes.admin_routes import blueprint as admin_bp
from routes.comment_routes import blueprint as comments_bp
from routes.installation_routes import blueprint as installations_bp
from services.audit_service import AuditLog
from services.clock import format_timestamp, utc_now
from services.comment_service import CommentStore
from services.installation_service import InstallationStore

logger = logging.getLogger(__name__)

SERVICE_NAME = "licensing-api"


def create_app(database=None, installations=None, comments=None, audit=None, clock=None, settings=None):
    """Build the Flask app with its collaborators passed in explicitly.

    Any collaborator left as None is built from `database` (a db.Database, defaulting to config.MYSQL).
    `settings` overrides ADMIN_TOKEN, CORS_ALLOW_ORIGIN and GRANT_DEFAULT_DAYS from config.
    """
    if database is None:
        database = Database(config.MYSQL)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config.update(
        ADMIN_TOKEN=config.ADMIN_TOKEN,
        CORS_ALLOW_ORIGIN=config.CORS_ALLOW_ORIGIN,
        GRANT_DEFAULT_DAYS=config.GRANT_DEFAULT_DAYS,
    )
    app.config.update(settings or {})

    app.extensions["installations"] = installations if installations is not None else InstallationStore(database)
    app.extensions["comments"] = comments if comments is not None else CommentStore(database)
    app.extensions["audit"] = audit if audit is not None else AuditLog(database)
    app.extensions["clock"] = clock or utc_now

    cors.init_app(app)
    app.register_blueprint(installations_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(comments_bp, url_prefix="/comments")

    @app.route("/")
    def root():
        """Root: simple response so GET / does not 404."""
        return jsonify(
            ok=True,
            service=SERVICE_NAME,
            status="ok",
            ts=format_timestamp(app.extensions["clock"]()),
            endpoints=[
                "POST /register_install",
                "GET /activation_status",
                "POST /admin/grant",
                "POST /admin/block",
                "POST /admin/unblock",
                "GET /admin/installs",
                "GET|POST /comments",
                "GET|DELETE /comments/<id>",
            ],
        ), 200

    @app.route("/favicon.ico")
    def favicon():
        """Avoid 404 for browser favicon requests."""
        return "", 204

    @app.route("/health")
    def health():
        return jsonify(ok=True, status="ok", service=SERVICE_NAME)

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify(ok=False, error="not_found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify(ok=False, error="method_not_allowed"), 405

    @app.errorhandler(InvalidArgument)
    def invalid_argument(e):
        return jsonify(ok=False, error=e.code), 400

    @app.errorhandler(StorageUnavailable)
    def storage_unavailable(e):
        logger.error("storage unavailable: %s", e)
        return jsonify(ok=False, error="storage_unavailable"), 503

    @app.errorhandler(Exception)
    def internal_error(e):
        if isinstance(e, HTTPException):
            return jsonify(ok=False, error=e.name.lower().replace(" ", "_")), e.code
        logger.exception("unhandled error: %s", e)
        return jsonify(ok=False, error="internal_error"), 500

    return app


def main():
    logging.basicConfig(stream=sys.stderr, level=config.LOG_LEVEL)
    database = Database(config.MYSQL)
    try:
        database.ping()
    except StorageUnavailable as e:
        logger.error("Database connection failed: %s", e)
        sys.exit(1)
    if not config.ADMIN_TOKEN:
        logger.warning("ADMIN_TOKEN is not set; /admin routes will refuse all requests")
    app = create_app(database=database)
    app.run(host="0.0.0.0", port=config.PORT, debug=(config.APP_ENV == "development"))


if __name__ == "__main__":
    main()
