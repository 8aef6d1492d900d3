"""
CORS headers on every response and a 204 answer for preflight requests.
"""
from flask import current_app, request

ALLOW_METHODS = "GET,POST,DELETE,OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE = "86400"


def cors_headers():
    return {
        "Access-Control-Allow-Origin": current_app.config.get("CORS_ALLOW_ORIGIN", "*"),
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": MAX_AGE,
    }


def handle_preflight():
    if request.method == "OPTIONS":
        return "", 204
    return None


def add_cors_headers(response):
    response.headers.update(cors_headers())
    return response


def init_app(app):
    app.before_request(handle_preflight)
    app.after_request(add_cors_headers)
