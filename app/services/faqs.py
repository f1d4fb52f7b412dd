"""FAQ entries: plain CRUD over the faqs table."""

import logging
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.constants.content import DEFAULT_PAGE_SIZE
from app.errors import NotFoundError, StoreUnavailable, ValidationError
from app.models import Faq

logger = logging.getLogger(__name__)

FAQ_FIELDS = ('question', 'answer')


def _commit(action: str):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"FAQ {action} failed: {e}")
        raise StoreUnavailable(f'FAQ {action} failed')


def _clean(data: dict) -> dict:
    """Known text fields only; a non-string value is a validation error."""
    cleaned = {}
    for field in FAQ_FIELDS:
        if field not in data or data[field] is None:
            continue
        if not isinstance(data[field], str):
            raise ValidationError(f'{field} must be a string')
        cleaned[field] = data[field]
    return cleaned


def get_faq(faq_id: int) -> Faq:
    faq = Faq.query.get(faq_id)
    if faq is None:
        raise NotFoundError('Faq not found')
    return faq


def create_faq(data: dict) -> Faq:
    fields = _clean(data)
    if not fields.get('question', '').strip():
        raise ValidationError('question is required')

    faq = Faq(**fields)
    db.session.add(faq)
    _commit('create')
    logger.info(f"FAQ {faq.id} created")
    return faq


def list_faqs(page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    pagination = Faq.query.order_by(Faq.created_at.desc(), Faq.id.desc()).paginate(
        page=page or 1, per_page=limit or DEFAULT_PAGE_SIZE, error_out=False
    )
    return {
        'data': [faq.to_dict() for faq in pagination.items],
        'total': pagination.total,
        'pages': pagination.pages,
        'current_page': pagination.page,
        'per_page': pagination.per_page,
    }


def update_faq(faq_id: int, data: dict) -> Faq:
    faq = get_faq(faq_id)
    fields = _clean(data)
    if 'question' in fields and not fields['question'].strip():
        raise ValidationError('question cannot be empty')

    for field, value in fields.items():
        setattr(faq, field, value)
    _commit('update')
    logger.info(f"FAQ {faq_id} updated")
    return faq


def delete_faq(faq_id: int):
    faq = get_faq(faq_id)
    db.session.delete(faq)
    _commit('delete')
    logger.info(f"FAQ {faq_id} deleted")
