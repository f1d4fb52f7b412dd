"""FAQ routes. All endpoints require a JWT."""

import logging
from flask import Blueprint, request

from app.services import faqs as faq_service
from app.utils import get_pagination, outcome, token_required

faqs_bp = Blueprint('faqs', __name__)
logger = logging.getLogger(__name__)


def _payload():
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


@faqs_bp.route('', methods=['POST'])
@token_required
def create(current_user_id):
    faq = faq_service.create_faq(_payload())
    return outcome(faq.to_dict(), message='Faq created successfully!', status=201)


@faqs_bp.route('/ask-a-question', methods=['POST'])
@token_required
def ask_a_question(current_user_id):
    """Store a user question without an answer."""
    data = _payload()
    faq = faq_service.create_faq({'question': data.get('question')})
    # Notifying the admins is left to the mail collaborator
    logger.info(f"User {current_user_id} submitted question {faq.id}")
    return outcome(faq.to_dict(), message='Question submitted successfully!', status=201)


@faqs_bp.route('', methods=['GET'])
@token_required
def list_faqs(current_user_id):
    page, limit = get_pagination()
    result = faq_service.list_faqs(page, limit)
    data = result.pop('data')
    return outcome(data, **result)


@faqs_bp.route('/<int:faq_id>', methods=['GET'])
@token_required
def get_faq(current_user_id, faq_id):
    return outcome(faq_service.get_faq(faq_id).to_dict())


@faqs_bp.route('/<int:faq_id>', methods=['POST', 'PUT'])
@token_required
def update(current_user_id, faq_id):
    faq = faq_service.update_faq(faq_id, _payload())
    return outcome(faq.to_dict(), message='Faq updated successfully!')


@faqs_bp.route('/<int:faq_id>', methods=['DELETE'])
@token_required
def delete(current_user_id, faq_id):
    faq_service.delete_faq(faq_id)
    return outcome(message='Faq deleted successfully!')
