"""
Tests for the post write orchestration (create, update, remove).
"""

import os
import pytest
from faker import Faker
from flask import current_app

from app import db
from app.constants import Language, POST_MODULE
from app.errors import FileStorageError, NotFoundError, PartialWriteFailure, ValidationError
from app.models import FavouritePost, Media, Post, Translation
from app.services import posts as post_service
from app.services.localization import localize
from app.services.posts import create_post, remove_post, set_featured, update_post

fake = Faker()


def _stored_path(url):
    relative = url[len('/uploads/'):]
    return os.path.join(current_app.config['UPLOAD_FOLDER'], *relative.split('/'))


def _translations(post_id):
    return Translation.query.filter_by(module=POST_MODULE, module_id=post_id).all()


class TestCreatePost:
    """Tests for create_post"""

    def test_round_trip_default_language(self, db_session):
        """Base title in the default language, Arabic title as a translation."""
        post = create_post({'title': 'A', 'title_ar': 'B'})

        record = localize(post.to_dict(), Language.EN)

        assert record['title'] == 'A'
        assert record['title_en'] == 'A'
        assert record['title_ar'] == 'B'

    def test_round_trip_secondary_language(self, db_session):
        post = create_post({'title': 'A', 'title_ar': 'B', 'description': 'D'})

        record = localize(post.to_dict(), Language.AR)

        assert record['title'] == 'B'
        assert record['description'] == 'D'
        assert record['description_ar'] == 'D'

    def test_null_values_write_nothing(self, db_session):
        post = create_post({'title': 'A', 'description': None, 'title_ar': None})

        rows = _translations(post.id)

        assert [(row.language_id, row.key) for row in rows] == [(Language.EN.value, 'title')]

    def test_empty_string_is_written(self, db_session):
        post = create_post({'title': 'A', 'description_ar': ''})

        row = Translation.query.filter_by(module_id=post.id, language_id=Language.AR.value, key='description').one()

        assert row.value == ''

    def test_missing_title_fails(self, db_session):
        with pytest.raises(ValidationError):
            create_post({'description': fake.paragraph()})

        assert Post.query.count() == 0

    def test_blank_title_fails(self, db_session):
        with pytest.raises(ValidationError):
            create_post({'title': '   '})

    def test_unresolved_categories_are_dropped(self, db_session, category_tree):
        post = create_post({
            'title': 'A',
            'category_ids': [category_tree['root'], 99999, category_tree['grandchild']],
        })

        assert {c.id for c in post.categories} == {category_tree['root'], category_tree['grandchild']}

    def test_base_fields_and_featured_flag(self, db_session):
        post = create_post({
            'title': 'A',
            'url': 'https://example.com',
            'date': '12-12-2023',
            'time': '12:00 AM',
            'is_featured': True,
        })

        assert post.url == 'https://example.com'
        assert post.date == '12-12-2023'
        assert post.time == '12:00 AM'
        assert post.is_featured is True

    def test_slot_and_gallery_uploads(self, db_session, make_upload):
        files = {
            'pdf': make_upload('notes.pdf', b'%PDF-1.4 test', 'application/pdf'),
            'images': [make_upload('one.jpg'), make_upload('two.png', b'\x89PNG' + b'0' * 16, 'image/png')],
        }

        post = create_post({'title': 'A'}, files)

        assert post.pdf.startswith('/uploads/posts/pdfs/')
        assert os.path.exists(_stored_path(post.pdf))
        assert len(post.images) == 2
        assert all(media.module == POST_MODULE for media in post.images)
        assert all(os.path.exists(_stored_path(media.url)) for media in post.images)

    def test_gallery_failure_keeps_earlier_images(self, db_session, make_upload, monkeypatch):
        real_upload = post_service.upload_post_file
        calls = []

        def flaky_upload(folder, file):
            calls.append(file.filename)
            if file.filename == 'broken.jpg':
                return None, 'disk full'
            return real_upload(folder, file)

        monkeypatch.setattr(post_service, 'upload_post_file', flaky_upload)
        files = {'images': [make_upload('first.jpg'), make_upload('broken.jpg'), make_upload('last.jpg')]}

        with pytest.raises(PartialWriteFailure) as exc_info:
            create_post({'title': 'A', 'title_ar': 'B'}, files)

        journal = exc_info.value.journal
        post_id = journal.post_id
        assert journal.failures[-1]['step'] == 'gallery:1'
        assert 'translations' in journal.completed
        assert 'gallery:0' in journal.completed
        # Nothing after the failing file was attempted
        assert calls == ['first.jpg', 'broken.jpg']
        assert db.session.get(Post, post_id) is not None
        assert Media.query.filter_by(module_id=post_id).count() == 1
        assert exc_info.value.post['id'] == post_id

    def test_partial_failure_can_be_compensated(self, db_session, make_upload, monkeypatch):
        monkeypatch.setattr(post_service, 'upload_post_file', lambda folder, file: (None, 'offline'))

        with pytest.raises(PartialWriteFailure) as exc_info:
            create_post({'title': 'A', 'title_ar': 'B'}, {'images': [make_upload()]})

        journal = exc_info.value.journal
        assert journal.compensate() == []
        assert db.session.get(Post, journal.post_id) is None
        assert _translations(journal.post_id) == []

    def test_slot_upload_failure_aborts_before_post(self, db_session, make_upload, monkeypatch):
        real_upload = post_service.upload_post_file
        stored = []

        def upload(folder, file):
            if folder == 'posts/images':
                return None, 'bucket missing'
            url, error = real_upload(folder, file)
            stored.append(url)
            return url, error

        monkeypatch.setattr(post_service, 'upload_post_file', upload)
        files = {
            'video': make_upload('clip.mp4', b'0' * 64, 'video/mp4'),
            'image': make_upload('cover.jpg'),
        }

        with pytest.raises(FileStorageError):
            create_post({'title': 'A'}, files)

        assert Post.query.count() == 0
        # The video stored earlier in the call was removed again
        assert stored and not os.path.exists(_stored_path(stored[0]))


class TestUpdatePost:
    """Tests for update_post"""

    def test_upsert_never_duplicates(self, make_post):
        post = make_post(title_ar='first')

        update_post(post.id, {'title_ar': 'second'})
        update_post(post.id, {'title_ar': 'third'})

        rows = Translation.query.filter_by(
            module=POST_MODULE, module_id=post.id, language_id=Language.AR.value, key='title'
        ).all()
        assert len(rows) == 1
        assert rows[0].value == 'third'

    def test_creates_missing_translation(self, make_post):
        post = make_post()

        update_post(post.id, {'description_ar': 'وصف'})

        assert localize(db.session.get(Post, post.id).to_dict(), Language.AR)['description'] == 'وصف'

    def test_default_language_title_updates_base(self, make_post):
        post = make_post(title='Old')

        updated = update_post(post.id, {'title': 'New'})

        assert updated.title == 'New'
        assert localize(updated.to_dict(), Language.EN)['title_en'] == 'New'

    def test_categories_replace_not_merge(self, make_post, category_tree):
        post = make_post(category_ids=[category_tree['root'], category_tree['child']])

        updated = update_post(post.id, {'category_ids': [category_tree['other']]})

        assert [c.id for c in updated.categories] == [category_tree['other']]

    def test_omitted_categories_are_untouched(self, make_post, category_tree):
        post = make_post(category_ids=[category_tree['root']])

        updated = update_post(post.id, {'description': 'changed'})

        assert [c.id for c in updated.categories] == [category_tree['root']]

    def test_empty_category_list_clears(self, make_post, category_tree):
        post = make_post(category_ids=[category_tree['root']])

        updated = update_post(post.id, {'category_ids': []})

        assert updated.categories == []

    def test_slot_file_replaced_and_gallery_added(self, make_post, make_upload):
        post = make_post(files={'image': make_upload('old.jpg'), 'images': [make_upload('g1.jpg')]})
        old_image = post.image

        updated = update_post(post.id, {}, {'image': make_upload('new.jpg'), 'images': [make_upload('g2.jpg')]})

        assert updated.image != old_image
        assert len(updated.images) == 2
        # Reclaiming the replaced file belongs to the storage side
        assert os.path.exists(_stored_path(old_image))

    def test_blank_title_rejected(self, make_post):
        post = make_post()

        with pytest.raises(ValidationError):
            update_post(post.id, {'title': ''})

    def test_unknown_post(self, db_session):
        with pytest.raises(NotFoundError):
            update_post(99999, {'title': 'x'})


class TestRemovePost:
    """Tests for remove_post"""

    def test_cascades_translations_media_and_files(self, make_post, make_upload):
        post = make_post(
            title_ar='B',
            description_ar='D',
            files={'audio': make_upload('talk.mp3', b'ID3' + b'0' * 32, 'audio/mpeg'), 'images': [make_upload()]}
        )
        post_id = post.id
        urls = [post.audio] + [media.url for media in post.images]

        journal = remove_post(post_id)

        assert journal.ok
        assert journal.completed == ['post', 'translations', 'media', 'user_links', 'files']
        assert db.session.get(Post, post_id) is None
        assert _translations(post_id) == []
        assert Media.query.filter_by(module_id=post_id).count() == 0
        assert not any(os.path.exists(_stored_path(url)) for url in urls)

    def test_removes_favourite_rows(self, make_post, test_user):
        post = make_post()
        db.session.add(FavouritePost(user_id=test_user['id'], post_id=post.id))
        db.session.commit()

        remove_post(post.id)

        assert FavouritePost.query.filter_by(post_id=post.id).count() == 0

    def test_attempts_every_step_on_failure(self, make_post, make_upload, monkeypatch):
        post = make_post(title_ar='B', files={'images': [make_upload()]})
        post_id = post.id
        monkeypatch.setattr(post_service, 'delete_file', lambda url: (False, 'permission denied'))

        with pytest.raises(PartialWriteFailure) as exc_info:
            remove_post(post_id)

        journal = exc_info.value.journal
        assert [failure['step'] for failure in journal.failures] == ['files']
        assert _translations(post_id) == []
        assert Media.query.filter_by(module_id=post_id).count() == 0

    def test_unknown_post(self, db_session):
        with pytest.raises(NotFoundError):
            remove_post(99999)


class TestSetFeatured:

    def test_toggles_flag(self, make_post):
        post = make_post()

        assert set_featured(post.id, True).is_featured is True
        assert set_featured(post.id, False).is_featured is False
