"""Authentication routes for user registration and login."""

import logging
from flask import Blueprint, request
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models import User
from app.utils import issue_token, outcome, token_required

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user account."""
    data = request.get_json(silent=True)

    if not data or not all(data.get(k) for k in ['username', 'email', 'password']):
        return outcome(success=False, message='Missing required fields', status=400)

    if User.query.filter_by(username=data['username']).first():
        return outcome(success=False, message='Username already exists', status=409)

    if User.query.filter_by(email=data['email']).first():
        return outcome(success=False, message='Email already exists', status=409)

    user = User(
        username=data['username'],
        email=data['email'],
        first_name=data.get('first_name'),
        last_name=data.get('last_name')
    )
    user.set_password(data['password'])

    db.session.add(user)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Registration failed: {e}")
        return outcome(success=False, message='Registration failed', status=500)

    logger.info(f"User {user.id} registered")
    return outcome(
        user.to_dict(),
        message='User registered successfully',
        status=201,
        token=issue_token(user)
    )


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate user and return JWT token."""
    data = request.get_json(silent=True)

    if not data or not all(k in data for k in ['email', 'password']):
        return outcome(success=False, message='Missing email or password', status=400)

    user = User.query.filter_by(email=data['email']).first()

    if not user or not user.check_password(data['password']):
        return outcome(success=False, message='Invalid email or password', status=401)

    if not user.is_active:
        return outcome(success=False, message='Account is disabled', status=403)

    return outcome(user.to_dict(), message='Login successful', token=issue_token(user))


@auth_bp.route('/profile', methods=['GET'])
@token_required
def get_profile(current_user_id):
    """Get current user profile."""
    user = User.query.get(current_user_id)
    if not user:
        return outcome(success=False, message='User not found', status=404)
    return outcome(user.to_dict())
