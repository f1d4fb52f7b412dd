"""Shared authentication utilities.

JWT decorators used by the route modules. Tokens are HS256 PyJWT tokens
issued by /api/auth/login and signed with JWT_SECRET_KEY.
"""

from datetime import datetime, timedelta
from functools import wraps
from flask import request, current_app
import jwt

from app.utils.responses import outcome


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def issue_token(user):
    payload = {
        'user_id': user.id,
        'username': user.username,
        'exp': datetime.utcnow() + timedelta(hours=current_app.config['JWT_EXPIRES_HOURS'])
    }
    return jwt.encode(payload, _get_secret_key(), algorithm='HS256')


def _decode(auth_header):
    # Support both "Bearer <token>" and raw token formats
    token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
    payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
    return payload['user_id']


def token_required(f):
    """
    Decorator to require valid JWT token.

    Extracts user_id from JWT token and passes it as the first argument
    to the decorated function.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return outcome({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return outcome(success=False, message='Token is missing', status=401)

        try:
            current_user_id = _decode(auth_header)
        except jwt.ExpiredSignatureError:
            return outcome(success=False, message='Token has expired', status=401)
        except (jwt.InvalidTokenError, KeyError, IndexError):
            return outcome(success=False, message='Token is invalid', status=401)

        return f(current_user_id, *args, **kwargs)
    return decorated
