"""Category routes. Categories form a tree used to filter posts."""

from flask import Blueprint, request

from app.errors import ValidationError
from app.services import categories as category_service
from app.utils import outcome, token_required

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('', methods=['GET'])
def list_categories():
    """Category tree, roots first with children nested."""
    return outcome(category_service.category_tree())


@categories_bp.route('/<int:category_id>', methods=['GET'])
def get_category(category_id):
    return outcome(category_service.get_category(category_id).to_dict())


@categories_bp.route('', methods=['POST'])
@token_required
def create_category(current_user_id):
    data = request.get_json(silent=True) or {}
    parent_id = data.get('parent_id')
    try:
        parent_id = int(parent_id) if parent_id not in (None, '') else None
    except (TypeError, ValueError):
        raise ValidationError('parent_id must be an integer')

    category = category_service.create_category(data.get('name'), parent_id)
    return outcome(category.to_dict(), message='Category created successfully!', status=201)


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
@token_required
def delete_category(current_user_id, category_id):
    category_service.delete_category(category_id)
    return outcome(message='Category deleted successfully!')
