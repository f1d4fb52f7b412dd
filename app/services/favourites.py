"""Per-user favourite posts with toggle semantics."""

import logging
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.errors import NotFoundError, StoreUnavailable
from app.models import FavouritePost, Post, User
from app.services.posts import get_post

logger = logging.getLogger(__name__)


def _get_user(user_id: int) -> User:
    user = User.query.get(user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user


def toggle_favourite(user_id: int, post_id: int) -> dict:
    """Add the post to the user's favourites, or remove it if present.

    Returns {'added': bool}. An unknown post or user changes nothing.
    """
    get_post(post_id)
    _get_user(user_id)

    try:
        added = FavouritePost.toggle(user_id, post_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Favourite toggle failed for user {user_id}, post {post_id}: {e}")
        raise StoreUnavailable('Favourites could not be updated')

    logger.info(f"User {user_id} {'added' if added else 'removed'} favourite post {post_id}")
    return {'added': added}


def favourite_post_ids(user_id: int) -> list:
    _get_user(user_id)
    return FavouritePost.post_ids_for(user_id)


def favourite_posts(user_id: int) -> list:
    """Favourite posts that still exist, newest post first."""
    post_ids = favourite_post_ids(user_id)
    if not post_ids:
        return []

    # Ids whose post was deleted simply do not match
    return Post.query.filter(Post.id.in_(post_ids)).order_by(
        Post.created_at.desc(), Post.id.desc()
    ).all()
