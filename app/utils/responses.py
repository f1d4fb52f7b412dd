"""Structured outcome responses: {success, message, data, ...}."""

from flask import jsonify


def outcome(data=None, message='', success=True, status=200, **extra):
    """Build the JSON body every route returns."""
    body = {
        'success': success,
        'message': message,
        'data': data if data is not None else [],
    }
    body.update(extra)
    return jsonify(body), status
