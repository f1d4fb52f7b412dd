"""Post routes: localized reads, cascading writes and favourites.

Every endpoint requires a JWT. The response language comes from the
'lang' header (1/2 or en/ar) and defaults to English.
"""

import logging
from flask import Blueprint, request

from app.constants import TRANSLATABLE_FIELDS, resolve_language
from app.errors import ValidationError
from app.services import content_feed
from app.services.favourites import favourite_post_ids, toggle_favourite
from app.services.localization import localize
from app.services.posts import create_post, remove_post, set_featured, update_post
from app.utils import (
    get_language,
    get_pagination,
    get_post_payload,
    get_uploaded_files,
    outcome,
    token_required,
)
from app.utils.request_parsing import get_category_filter, parse_bool

posts_bp = Blueprint('posts', __name__)
logger = logging.getLogger(__name__)


@posts_bp.route('', methods=['POST'])
@token_required
def create(current_user_id):
    """Create a post from JSON or multipart form data (with uploads)."""
    data = get_post_payload()
    files = get_uploaded_files()
    logger.info(f"User {current_user_id} creating post")

    post = create_post(data, files)
    return outcome(
        localize(post.to_dict(), get_language()),
        message='Post created successfully!',
        status=201
    )


@posts_bp.route('', methods=['GET'])
@token_required
def list_posts(current_user_id):
    """Paginated posts, filterable by category subtree and title.

    Query params:
    - page, limit: pagination (defaults 1, 10)
    - category_id: include posts in this category or any descendant
    - title: case-insensitive match on the title in any language
    """
    page, limit = get_pagination()
    result = content_feed.list_posts(
        page=page,
        limit=limit,
        category_id=get_category_filter(),
        title=request.args.get('title'),
        language=get_language()
    )
    data = result.pop('data')
    return outcome(data, **result)


@posts_bp.route('/featured', methods=['GET'])
@token_required
def featured(current_user_id):
    return outcome(content_feed.featured_posts(get_language()))


@posts_bp.route('/screen-wise', methods=['GET'])
@token_required
def screen_wise(current_user_id):
    """Posts grouped by attached media kind: videos, audios, images, pdfs."""
    return outcome(content_feed.screen_wise(
        category_id=get_category_filter(),
        title=request.args.get('title'),
        language=get_language()
    ))


@posts_bp.route('/<int:post_id>', methods=['GET'])
@token_required
def get_post(current_user_id, post_id):
    return outcome(content_feed.get_post(post_id, get_language(), user_id=current_user_id))


@posts_bp.route('/<int:post_id>', methods=['POST', 'PUT'])
@token_required
def update(current_user_id, post_id):
    data = get_post_payload()
    files = get_uploaded_files()
    logger.info(f"User {current_user_id} updating post {post_id}")

    post = update_post(post_id, data, files)
    return outcome(
        localize(post.to_dict(), get_language()),
        message='Post updated successfully!'
    )


@posts_bp.route('/<int:post_id>/mark-as-featured', methods=['POST'])
@token_required
def mark_as_featured(current_user_id, post_id):
    data = request.get_json(silent=True) or request.form
    is_featured = parse_bool(data.get('is_featured'))
    if is_featured is None:
        raise ValidationError('is_featured is required')

    set_featured(post_id, is_featured)
    return outcome(message='Post marked successfully!')


@posts_bp.route('/<int:post_id>', methods=['DELETE'])
@token_required
def delete(current_user_id, post_id):
    journal = remove_post(post_id)
    logger.info(f"User {current_user_id} deleted post {post_id}")
    return outcome(journal.to_dict(), message='Post deleted successfully!')


@posts_bp.route('/category/<int:category_id>', methods=['GET'])
@token_required
def by_category(current_user_id, category_id):
    return outcome(content_feed.posts_by_category(category_id, get_language()))


@posts_bp.route('/history', methods=['GET'])
@token_required
def history(current_user_id):
    """Posts the current user has opened, most recent first."""
    page, limit = get_pagination()
    result = content_feed.post_history(current_user_id, page, limit, get_language())
    data = result.pop('data')
    return outcome(data, **result)


@posts_bp.route('/<int:post_id>/favourite', methods=['POST'])
@token_required
def favourite(current_user_id, post_id):
    """Toggle the post in the current user's favourites."""
    result = toggle_favourite(current_user_id, post_id)
    message = 'Added to favourites!' if result['added'] else 'Removed from favourites!'
    return outcome(result, message=message)


@posts_bp.route('/favourites', methods=['GET'])
@token_required
def favourites(current_user_id):
    return outcome(content_feed.favourites(current_user_id, get_language()))


@posts_bp.route('/favourites/ids', methods=['GET'])
@token_required
def favourite_ids(current_user_id):
    return outcome(favourite_post_ids(current_user_id))


@posts_bp.route('/translation', methods=['POST'])
@token_required
def get_translation(current_user_id):
    """Look up one stored translation: body {module_id, language_id, key}."""
    data = request.get_json(silent=True) or {}
    key = data.get('key')
    if key not in TRANSLATABLE_FIELDS:
        raise ValidationError(f"key must be one of: {', '.join(TRANSLATABLE_FIELDS)}")
    try:
        module_id = int(data.get('module_id'))
    except (TypeError, ValueError):
        raise ValidationError('module_id must be an integer')

    entry = content_feed.get_translation(module_id, resolve_language(data.get('language_id')), key)
    return outcome(entry)
