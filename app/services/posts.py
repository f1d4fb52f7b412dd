"""Write orchestration for posts.

A post write touches several rows that share no transaction: the post
row, its translations, its category links, its gallery media rows and
the stored files. The functions here sequence those writes through a
WriteJournal:

- a failure before or while saving the post row aborts the whole call
  (files uploaded earlier in the call are deleted again);
- a failure in a later step raises PartialWriteFailure with the journal.
  Earlier steps stay committed; ``journal.compensate()`` undoes them if the
  caller wants that.

Consistency caveat: between the post row commit and the last side effect
other readers can observe a post without its translations, categories or
gallery. Translation upserts and the category replace are last-writer-wins
under concurrent updates of the same post.
"""

import logging
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.constants import (
    BASE_FIELDS,
    FILE_SLOTS,
    GALLERY_FIELD,
    GALLERY_FOLDER,
    POST_MODULE,
    SUPPORTED_LANGUAGES,
    TRANSLATABLE_FIELDS,
    input_field_name,
)
from app.errors import (
    ContentError,
    FileStorageError,
    NotFoundError,
    PartialWriteFailure,
    StoreUnavailable,
    ValidationError,
)
from app.models import FavouritePost, Media, Post, UserPostHistory
from app.services.categories import resolve_categories
from app.services.storage import delete_file, upload_post_file
from app.services.translations import (
    delete_translation,
    find_translation,
    update_translation,
    upsert_translation,
)
from app.services.write_journal import WriteJournal

logger = logging.getLogger(__name__)

# Failures that turn into a partial write once the post row exists
STEP_ERRORS = (SQLAlchemyError, ContentError)


def get_post(post_id: int) -> Post:
    try:
        post = Post.query.get(post_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Post lookup failed: {e}")
        raise StoreUnavailable('Post lookup failed')
    if post is None:
        raise NotFoundError('Post not found')
    return post


def _refetch(post_id: int) -> Post | None:
    db.session.expire_all()
    return Post.query.get(post_id)


def _delete_stored_file(url: str):
    ok, error = delete_file(url)
    if not ok:
        raise FileStorageError(f'Could not delete {url}: {error}')


def _commit(action: str):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"{action} failed: {e}")
        raise StoreUnavailable(f'{action} failed')


def _upload_slot_files(files: dict, journal: WriteJournal) -> dict:
    """Upload single-slot files. Any failure deletes what this call stored."""
    urls = {}
    for slot, folder in FILE_SLOTS.items():
        file = files.get(slot)
        if not file:
            continue

        url, error = upload_post_file(folder, file)
        if error:
            journal.fail(f'upload:{slot}', error)
            journal.compensate()
            raise FileStorageError(f'{slot} upload failed: {error}')

        journal.record(f'upload:{slot}', compensate=lambda url=url: _delete_stored_file(url))
        urls[slot] = url
    return urls


def _write_translations(post_id: int, data: dict, journal: WriteJournal):
    """Upsert one translation per supplied (language, key) value.

    A None value is skipped; an empty string is written.
    """
    with journal.step('translations'):
        for language in SUPPORTED_LANGUAGES:
            for key in TRANSLATABLE_FIELDS:
                value = data.get(input_field_name(key, language))
                if value is None:
                    continue

                previous = find_translation(POST_MODULE, post_id, language, key)
                previous_value = previous.value if previous is not None else None
                entry = upsert_translation(POST_MODULE, post_id, language, key, value)

                if previous_value is None:
                    journal.add_compensation(
                        f'translation:{language.tag}/{key}',
                        lambda entry_id=entry.id: delete_translation(entry_id)
                    )
                elif previous_value != value:
                    journal.add_compensation(
                        f'translation:{language.tag}/{key}',
                        lambda entry_id=entry.id, old=previous_value: update_translation(entry_id, old)
                    )


def _replace_categories(post: Post, category_ids: list, journal: WriteJournal):
    """Replace the post's category set with the ids that resolve."""
    with journal.step('categories'):
        previous = list(post.categories)
        categories = resolve_categories(category_ids)
        post.categories = categories
        _commit('Category link')
        logger.info(f"Post {post.id} linked to categories {[c.id for c in categories]}")

    def restore():
        post.categories = previous
        _commit('Category restore')

    journal.add_compensation('categories', restore)


def _delete_media_row(media_id: int):
    media = Media.query.get(media_id)
    if media is not None:
        db.session.delete(media)
        _commit('Media delete')


def _attach_gallery(post_id: int, gallery: list, journal: WriteJournal):
    """Store gallery files as media rows, one independent step per file.

    A failing file stops the loop; images attached before it remain.
    """
    for index, file in enumerate(gallery):
        step = f'gallery:{index}'
        url, error = upload_post_file(GALLERY_FOLDER, file)
        if error:
            journal.fail(step, error)
            raise FileStorageError(f'Gallery image {index} upload failed: {error}')

        media = Media(module=POST_MODULE, module_id=post_id, url=url)
        db.session.add(media)
        try:
            _commit('Media create')
        except StoreUnavailable as e:
            # Leave no stored file without its media row
            delete_file(url)
            journal.fail(step, e)
            raise

        def undo(media_id=media.id, url=url):
            _delete_media_row(media_id)
            _delete_stored_file(url)

        journal.record(step, compensate=undo)


def _failed_step(journal: WriteJournal) -> str:
    return journal.failures[-1]['step'] if journal.failures else 'a later step'


def _run_side_effects(post: Post, data: dict, files: dict, journal: WriteJournal):
    _write_translations(post.id, data, journal)

    category_ids = data.get('category_ids')
    if category_ids is not None:
        _replace_categories(post, category_ids, journal)

    _attach_gallery(post.id, files.get(GALLERY_FIELD) or [], journal)


def create_post(data: dict, files: dict | None = None) -> Post:
    """Create a post with its translations, categories and uploads.

    ``data['category_ids']`` must already be a list of ints; ids that do
    not resolve are dropped.
    """
    title = data.get('title')
    if title is None or not str(title).strip():
        raise ValidationError('title is required')

    files = files or {}
    journal = WriteJournal('create')
    slot_urls = _upload_slot_files(files, journal)

    post = Post(
        title=title,
        description=data.get('description'),
        is_featured=bool(data.get('is_featured') or False),
        **{field: data.get(field) for field in BASE_FIELDS},
        **slot_urls
    )
    db.session.add(post)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        journal.fail('post', e)
        journal.compensate()
        raise StoreUnavailable('Post could not be saved')

    post_id = post.id
    journal.post_id = post_id
    journal.record('post', compensate=lambda: _delete_post_row(post_id))
    logger.info(f"Post {post_id} created")

    try:
        _run_side_effects(post, data, files, journal)
    except STEP_ERRORS as e:
        refetched = _refetch(post_id)
        raise PartialWriteFailure(
            f'Post {post_id} created but {_failed_step(journal)} failed: {e}',
            journal,
            post=refetched.to_dict() if refetched else None
        ) from e

    return _refetch(post_id)


def update_post(post_id: int, data: dict, files: dict | None = None) -> Post:
    """Update a post.

    Supplied base fields overwrite, translations are upserted, a non-null
    ``category_ids`` replaces the whole category set (an empty list clears
    it, omission leaves it alone), slot files replace the previous URL and
    gallery files are added.
    """
    post = get_post(post_id)

    if 'title' in data and data['title'] is not None and not str(data['title']).strip():
        raise ValidationError('title cannot be empty')

    files = files or {}
    journal = WriteJournal('update', post_id)
    slot_urls = _upload_slot_files(files, journal)

    changes = {}
    for field in TRANSLATABLE_FIELDS + BASE_FIELDS:
        if data.get(field) is not None:
            changes[field] = data[field]
    if data.get('is_featured') is not None:
        changes['is_featured'] = bool(data['is_featured'])
    changes.update(slot_urls)

    previous = {field: getattr(post, field) for field in changes}
    for field, value in changes.items():
        setattr(post, field, value)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        journal.fail('post', e)
        journal.compensate()
        raise StoreUnavailable('Post could not be saved')

    def restore():
        target = Post.query.get(post_id)
        for field, value in previous.items():
            setattr(target, field, value)
        _commit('Post restore')

    journal.record('post', compensate=restore)

    for slot in slot_urls:
        if previous.get(slot):
            # The storage collaborator owns reclaiming replaced files
            logger.info(f"Post {post_id} {slot} replaced, orphaned {previous[slot]}")

    try:
        _run_side_effects(post, data, files, journal)
    except STEP_ERRORS as e:
        refetched = _refetch(post_id)
        raise PartialWriteFailure(
            f'Post {post_id} updated but {_failed_step(journal)} failed: {e}',
            journal,
            post=refetched.to_dict() if refetched else None
        ) from e

    logger.info(f"Post {post_id} updated")
    return _refetch(post_id)


def _delete_post_row(post_id: int):
    post = Post.query.get(post_id)
    if post is not None:
        db.session.delete(post)
        _commit('Post delete')


def _attempt(journal: WriteJournal, step: str, action):
    """Run one cleanup step; a failure is recorded and the next step still runs."""
    try:
        action()
    except STEP_ERRORS as e:
        journal.fail(step, e)
        return False
    journal.record(step)
    return True


def remove_post(post_id: int) -> WriteJournal:
    """Delete a post and everything keyed to it, best effort.

    Steps: post row, translations, media rows, favourites/history rows,
    stored files. Every step runs even if an earlier one failed; any
    failure raises PartialWriteFailure once all steps were attempted.
    """
    post = get_post(post_id)
    journal = WriteJournal('remove', post_id)
    file_urls = [getattr(post, slot) for slot in FILE_SLOTS if getattr(post, slot)]

    _attempt(journal, 'post', lambda: _delete_post_row(post_id))

    def delete_translations():
        for language in SUPPORTED_LANGUAGES:
            for key in TRANSLATABLE_FIELDS:
                entry = find_translation(POST_MODULE, post_id, language, key)
                if entry is not None:
                    delete_translation(entry.id)

    _attempt(journal, 'translations', delete_translations)

    def delete_media():
        for media in Media.query.filter_by(module=POST_MODULE, module_id=post_id).all():
            file_urls.append(media.url)
            _delete_media_row(media.id)

    _attempt(journal, 'media', delete_media)

    def delete_user_links():
        FavouritePost.query.filter_by(post_id=post_id).delete()
        UserPostHistory.query.filter_by(post_id=post_id).delete()
        _commit('Favourite/history cleanup')

    _attempt(journal, 'user_links', delete_user_links)

    def delete_files():
        errors = []
        for url in file_urls:
            ok, error = delete_file(url)
            if not ok:
                errors.append(f'{url}: {error}')
        if errors:
            raise FileStorageError('; '.join(errors))

    _attempt(journal, 'files', delete_files)

    if not journal.ok:
        raise PartialWriteFailure(f'Post {post_id} removed with errors', journal)

    logger.info(f"Post {post_id} removed")
    return journal


def set_featured(post_id: int, is_featured: bool) -> Post:
    post = get_post(post_id)
    post.is_featured = bool(is_featured)
    _commit('Featured flag update')
    logger.info(f"Post {post_id} featured={post.is_featured}")
    return post
