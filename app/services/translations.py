"""Translation store: point lookups and writes on the translations table.

Every function is one acquire-use-release round trip through the session.
A failed store call rolls the session back and raises StoreUnavailable;
nothing is retried here.
"""

import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.constants import Language
from app.errors import NotFoundError, StoreUnavailable
from app.models import Translation

logger = logging.getLogger(__name__)


def _store_failure(action: str, error: Exception) -> StoreUnavailable:
    db.session.rollback()
    logger.error(f"Translation store {action} failed: {error}")
    return StoreUnavailable(f'Translation store {action} failed')


def find_translation(module: str, module_id: int, language: Language, key: str) -> Translation | None:
    """Return the entry for (module, module_id, language, key) or None."""
    try:
        return Translation.query.filter_by(
            module=module,
            module_id=module_id,
            language_id=int(language),
            key=key
        ).first()
    except SQLAlchemyError as e:
        raise _store_failure('lookup', e)


def create_translation(module: str, module_id: int, language: Language, key: str, value: str) -> Translation:
    entry = Translation(
        module=module,
        module_id=module_id,
        language_id=int(language),
        key=key,
        value=value
    )
    db.session.add(entry)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        raise _store_failure('create', e)
    return entry


def update_translation(translation_id: int, value: str) -> Translation:
    try:
        entry = Translation.query.get(translation_id)
    except SQLAlchemyError as e:
        raise _store_failure('lookup', e)
    if entry is None:
        raise NotFoundError('Translation not found')

    entry.value = value
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        raise _store_failure('update', e)
    return entry


def delete_translation(translation_id: int):
    try:
        entry = Translation.query.get(translation_id)
        if entry is None:
            raise NotFoundError('Translation not found')
        db.session.delete(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        raise _store_failure('delete', e)


def upsert_translation(module: str, module_id: int, language: Language, key: str, value) -> Translation | None:
    """Update the entry for the slot in place, or create it.

    A None value is a no-op (returns None); an empty string is written.
    """
    if value is None:
        return None

    existing = find_translation(module, module_id, language, key)
    if existing is not None:
        if existing.value == value:
            return existing
        return update_translation(existing.id, value)

    try:
        return create_translation(module, module_id, language, key, value)
    except IntegrityError:
        # Lost an insert race on the unique slot; the row exists now
        logger.warning(f"Concurrent insert on translation slot {module}:{module_id} {language.tag}/{key}")
        existing = find_translation(module, module_id, language, key)
        if existing is None:
            raise StoreUnavailable('Translation store create failed')
        return update_translation(existing.id, value)


def prefetch_translations(module: str, module_ids) -> dict:
    """Load every entry for a batch of records in a SINGLE query.

    Returns a dict mapping (module_id, language_id, key) -> value, usable
    as the lookup for the overlay functions in app.services.localization.
    """
    module_ids = list(module_ids)
    if not module_ids:
        return {}

    try:
        rows = Translation.query.filter(
            Translation.module == module,
            Translation.module_id.in_(module_ids)
        ).all()
    except SQLAlchemyError as e:
        raise _store_failure('batch lookup', e)

    return {(row.module_id, row.language_id, row.key): row.value for row in rows}
