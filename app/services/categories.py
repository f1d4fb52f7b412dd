"""Category lookups and tree helpers."""

import logging
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.errors import NotFoundError, StoreUnavailable, ValidationError
from app.models import Category

logger = logging.getLogger(__name__)


def find_category(category_id: int) -> Category | None:
    try:
        return Category.query.get(category_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Category lookup failed: {e}")
        raise StoreUnavailable('Category lookup failed')


def get_category(category_id: int) -> Category:
    category = find_category(category_id)
    if category is None:
        raise NotFoundError('Category not found')
    return category


def resolve_categories(category_ids) -> list:
    """Resolve ids to categories, silently dropping ids that do not exist."""
    resolved = []
    for category_id in category_ids:
        category = find_category(category_id)
        if category is None:
            logger.debug(f"Dropping unknown category id {category_id}")
            continue
        resolved.append(category)
    return resolved


def subtree_ids(category_id: int) -> list:
    """Ids of the category and all of its descendants, breadth first."""
    root = get_category(category_id)
    ids = []
    seen = set()
    queue = [root]
    while queue:
        node = queue.pop(0)
        if node.id in seen:
            continue
        seen.add(node.id)
        ids.append(node.id)
        queue.extend(node.children)
    return ids


def category_tree() -> list:
    """Root categories with their children nested."""
    roots = Category.query.filter(Category.parent_id.is_(None)).order_by(Category.id).all()
    return [root.to_dict() for root in roots]


def create_category(name, parent_id=None) -> Category:
    if not name or not str(name).strip():
        raise ValidationError('name is required')
    if parent_id is not None:
        get_category(parent_id)

    category = Category(name=str(name).strip(), parent_id=parent_id)
    db.session.add(category)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Category create failed: {e}")
        raise StoreUnavailable('Category create failed')

    logger.info(f"Category {category.id} created (parent={parent_id})")
    return category


def delete_category(category_id: int):
    category = get_category(category_id)
    if category.children:
        raise ValidationError('Category has subcategories')

    # Drop post links first; the association has no ORM cascade from this side
    for post in category.posts.all():
        post.categories.remove(category)
    db.session.delete(category)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Category delete failed: {e}")
        raise StoreUnavailable('Category delete failed')

    logger.info(f"Category {category_id} deleted")
