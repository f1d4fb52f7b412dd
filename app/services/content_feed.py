"""Read paths for posts.

Every function fetches posts from the relational store, then passes them
through the overlay (preferred view, then suffixed columns) so callers get
fully localized dicts.
"""

import logging
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.constants import DEFAULT_LANGUAGE, POST_MODULE, Language
from app.constants.content import CATEGORY_POSTS_LIMIT, DEFAULT_PAGE_SIZE, FEATURED_LIMIT
from app.errors import NotFoundError, StoreUnavailable
from app.models import Category, Post, Translation, UserPostHistory
from app.services.categories import subtree_ids
from app.services.favourites import favourite_posts
from app.services.localization import localize, localize_many
from app.services.posts import get_post as fetch_post
from app.services.translations import find_translation

logger = logging.getLogger(__name__)

# Gallery-kind buckets returned by screen_wise, keyed by the post column
SCREEN_BUCKETS = {
    'videos': 'video',
    'audios': 'audio',
    'images': 'image',
    'pdfs': 'pdf',
}


def _like_pattern(text):
    """Substring pattern with LIKE wildcards in ``text`` matched literally."""
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


def _filtered_query(category_id=None, title=None):
    query = Post.query

    if category_id is not None:
        # Raises NotFoundError for an unknown category
        ids = subtree_ids(category_id)
        query = query.filter(Post.categories.any(Category.id.in_(ids)))

    if title:
        pattern = _like_pattern(title)
        matching = db.session.query(Translation.module_id).filter(
            Translation.module == POST_MODULE,
            Translation.key == 'title',
            Translation.value.ilike(pattern, escape='\\')
        )
        query = query.filter(or_(Post.id.in_(matching), Post.title.ilike(pattern, escape='\\')))

    return query.order_by(Post.created_at.desc(), Post.id.desc())


def _page(pagination, language):
    return {
        'data': localize_many([post.to_dict() for post in pagination.items], language),
        'total': pagination.total,
        'pages': pagination.pages,
        'current_page': pagination.page,
        'per_page': pagination.per_page,
    }


def list_posts(page=1, limit=DEFAULT_PAGE_SIZE, category_id=None, title=None, language: Language = DEFAULT_LANGUAGE):
    try:
        pagination = _filtered_query(category_id, title).paginate(
            page=page or 1, per_page=limit or DEFAULT_PAGE_SIZE, error_out=False
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Post list query failed: {e}")
        raise StoreUnavailable('Posts could not be loaded')
    return _page(pagination, language)


def featured_posts(language: Language = DEFAULT_LANGUAGE) -> list:
    posts = Post.query.filter_by(is_featured=True).order_by(
        Post.created_at.desc(), Post.id.desc()
    ).limit(FEATURED_LIMIT).all()
    return localize_many([post.to_dict() for post in posts], language)


def screen_wise(category_id=None, title=None, language: Language = DEFAULT_LANGUAGE) -> dict:
    """Posts grouped by which file column is set; one post may be in several groups."""
    grouped = {}
    for bucket, column in SCREEN_BUCKETS.items():
        query = _filtered_query(category_id, title).filter(getattr(Post, column).isnot(None))
        grouped[bucket] = localize_many([post.to_dict() for post in query.all()], language)
    return grouped


def get_post(post_id: int, language: Language = DEFAULT_LANGUAGE, user_id=None) -> dict:
    """Single localized post. Opening it as a signed-in user is recorded in history."""
    post = fetch_post(post_id)
    record = localize(post.to_dict(), language)

    if user_id is not None:
        db.session.add(UserPostHistory(user_id=user_id, post_id=post_id))
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            # History is best effort; the read itself succeeded
            db.session.rollback()
            logger.warning(f"Could not record history for user {user_id}, post {post_id}: {e}")

    return record


def posts_by_category(category_id: int, language: Language = DEFAULT_LANGUAGE) -> list:
    posts = _filtered_query(category_id=category_id).limit(CATEGORY_POSTS_LIMIT).all()
    return localize_many([post.to_dict() for post in posts], language)


def post_history(user_id: int, page=1, limit=DEFAULT_PAGE_SIZE, language: Language = DEFAULT_LANGUAGE) -> dict:
    """The user's opened posts, newest view first. Deleted posts are skipped."""
    pagination = UserPostHistory.query.filter_by(user_id=user_id).order_by(
        UserPostHistory.created_at.desc(), UserPostHistory.id.desc()
    ).paginate(page=page or 1, per_page=limit or DEFAULT_PAGE_SIZE, error_out=False)

    post_ids = [entry.post_id for entry in pagination.items]
    posts = {post.id: post for post in Post.query.filter(Post.id.in_(post_ids)).all()} if post_ids else {}
    records = [posts[post_id].to_dict() for post_id in post_ids if post_id in posts]

    return {
        'data': localize_many(records, language),
        'total': pagination.total,
        'pages': pagination.pages,
        'current_page': pagination.page,
        'per_page': pagination.per_page,
    }


def favourites(user_id: int, language: Language = DEFAULT_LANGUAGE) -> list:
    return localize_many([post.to_dict() for post in favourite_posts(user_id)], language)


def get_translation(module_id: int, language: Language, key: str) -> dict:
    entry = find_translation(POST_MODULE, module_id, language, key)
    if entry is None:
        raise NotFoundError('Translation not found')
    return entry.to_dict()
