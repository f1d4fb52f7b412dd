"""
Tests for the translation overlay (preferred view and suffixed columns).
"""

import pytest
from faker import Faker

from app import db
from app.constants import Language, POST_MODULE
from app.models import Translation
from app.services.localization import (
    full_projection,
    localize,
    localize_many,
    preferred_view,
    translated_columns,
)
from app.services.translations import create_translation, upsert_translation

fake = Faker()


def _record(post_id=1, title='Base title', description='Base description'):
    return {'id': post_id, 'title': title, 'description': description, 'url': None}


class TestPreferredView:
    """Requested-language overlay with fallback to the base value."""

    def test_uses_translation_when_present(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')

        view = preferred_view(_record(), Language.AR)

        assert view['title'] == 'عنوان'

    def test_falls_back_to_base_on_miss(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')

        view = preferred_view(_record(), Language.AR)

        # No Arabic description was ever written
        assert view['description'] == 'Base description'

    def test_empty_string_translation_is_a_hit(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'description', '')

        view = preferred_view(_record(), Language.AR)

        assert view['description'] == ''

    def test_other_records_translations_are_ignored(self, db_session):
        create_translation(POST_MODULE, 2, Language.AR, 'title', 'Other post')

        view = preferred_view(_record(post_id=1), Language.AR)

        assert view['title'] == 'Base title'

    def test_input_is_not_mutated(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')
        record = _record()

        preferred_view(record, Language.AR)

        assert record['title'] == 'Base title'


class TestTranslatedColumns:
    """Suffixed columns fall back slot by slot."""

    def test_every_language_and_key_present(self, db_session):
        columns = translated_columns(_record())

        assert set(columns) == {'title_en', 'title_ar', 'description_en', 'description_ar'}
        assert all(value == _record()[key.rsplit('_', 1)[0]] for key, value in columns.items())

    def test_slots_are_independent(self, db_session):
        before = translated_columns(_record())

        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')
        after = translated_columns(_record())

        assert after['title_ar'] == 'عنوان'
        assert after['title_en'] == before['title_en']
        assert after['description_ar'] == before['description_ar']

    def test_full_projection_keeps_base_fields(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')

        projected = full_projection(_record())

        assert projected['title'] == 'Base title'
        assert projected['title_ar'] == 'عنوان'


class TestLocalize:
    """Preferred view followed by the full projection."""

    def test_suffix_columns_fall_back_to_base_not_preferred(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')
        create_translation(POST_MODULE, 1, Language.EN, 'description', 'English description')

        localized = localize(_record(), Language.AR)

        assert localized['title'] == 'عنوان'
        # description has no Arabic value: main field and _ar column use the base
        assert localized['description'] == 'Base description'
        assert localized['description_ar'] == 'Base description'
        assert localized['description_en'] == 'English description'

    def test_is_idempotent(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')
        record = _record()

        first = localize(record, Language.AR)
        second = localize(record, Language.AR)

        assert first == second

    def test_does_not_write_to_store(self, db_session):
        create_translation(POST_MODULE, 1, Language.AR, 'title', 'عنوان')
        count = Translation.query.count()

        localize(_record(), Language.EN)
        localize_many([_record(), _record(post_id=2)], Language.AR)

        assert Translation.query.count() == count


class TestLocalizeMany:
    """Batch overlay."""

    def test_preserves_input_order(self, db_session):
        records = [_record(post_id=i, title=f'Title {i}') for i in (5, 2, 9, 1)]
        for record in records:
            upsert_translation(POST_MODULE, record['id'], Language.AR, 'title', f"AR {record['id']}")

        localized = localize_many(records, Language.AR)

        assert [item['id'] for item in localized] == [5, 2, 9, 1]
        assert [item['title'] for item in localized] == ['AR 5', 'AR 2', 'AR 9', 'AR 1']

    def test_matches_single_record_overlay(self, db_session):
        records = [_record(post_id=i) for i in range(1, 4)]
        upsert_translation(POST_MODULE, 2, Language.AR, 'description', fake.sentence())

        batch = localize_many(records, Language.AR)
        single = [localize(record, Language.AR) for record in records]

        assert batch == single

    def test_empty_batch(self, db_session):
        assert localize_many([], Language.AR) == []
