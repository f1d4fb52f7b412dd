"""Normalization of client input at the HTTP boundary.

Services only see canonical values: a Language member, a list of int
category ids, booleans, and a dict of uploaded files.
"""

import logging
from flask import current_app, request

from app.constants import (
    FILE_SLOTS,
    GALLERY_FIELD,
    SUPPORTED_LANGUAGES,
    TRANSLATABLE_FIELDS,
    BASE_FIELDS,
    input_field_name,
    resolve_language,
)
from app.errors import UploadRejected, ValidationError

logger = logging.getLogger(__name__)

TRUE_VALUES = ('1', 'true', 'yes', 'on')

# Allowed extensions per upload field
ALLOWED_EXTENSIONS = {
    'video': {'mp4', 'mov', 'webm', 'mkv', 'avi'},
    'audio': {'mp3', 'wav', 'ogg', 'm4a', 'aac'},
    'image': {'png', 'jpg', 'jpeg', 'gif', 'webp', 'heic'},
    'pdf': {'pdf'},
    GALLERY_FIELD: {'png', 'jpg', 'jpeg', 'gif', 'webp', 'heic'},
}


def normalize_category_ids(value):
    """Turn client category input into a list of ints.

    Accepts a list, a comma-separated string, or a list mixing ints and
    comma-separated strings. Any other scalar counts as a one-item list.
    Items that are not integers are dropped, duplicates are removed keeping
    first occurrence. None stays None.
    """
    if value is None:
        return None

    if not isinstance(value, (list, tuple)):
        value = [value]

    ids = []
    for item in value:
        if isinstance(item, bool):
            logger.debug(f"Dropping category id {item!r}")
            continue
        if isinstance(item, int):
            candidates = [item]
        else:
            candidates = [part.strip() for part in str(item).split(',') if part.strip()]

        for candidate in candidates:
            try:
                category_id = int(candidate)
            except (TypeError, ValueError):
                logger.debug(f"Dropping category id {candidate!r}")
                continue
            if category_id not in ids:
                ids.append(category_id)
    return ids


def parse_bool(value):
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in TRUE_VALUES


def get_language():
    """Requested language from the 'lang' header or query arg."""
    return resolve_language(request.headers.get('lang') or request.args.get('lang'))


def get_pagination():
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', None, type=int) or request.args.get('per_page', 10, type=int)
    return max(page, 1), max(min(limit, 100), 1)


def get_category_filter():
    """Optional 'category_id' query arg. Present but not an int is a 400."""
    raw = request.args.get('category_id')
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError('category_id must be an integer')


def post_fields():
    """Names of every draft field a post write accepts."""
    names = ['category_ids', 'is_featured']
    names.extend(BASE_FIELDS)
    for language in SUPPORTED_LANGUAGES:
        for key in TRANSLATABLE_FIELDS:
            names.append(input_field_name(key, language))
    return names


def get_post_payload():
    """Read a post draft from a JSON body or multipart form.

    Only known fields are kept; absent fields are left out so updates can
    tell "not supplied" from "supplied". Text fields must be strings: a
    title of any other type fails the call, other text fields are dropped.
    """
    if request.is_json:
        source = request.get_json(silent=True)
        if not isinstance(source, dict):
            source = {}
        raw_category_ids = source.get('category_ids')
    else:
        source = request.form
        raw_category_ids = request.form.getlist('category_ids') or None

    text_fields = set(post_fields()) - {'category_ids', 'is_featured'}
    data = {}
    for name in post_fields():
        if name == 'category_ids' or name not in source:
            continue

        value = source.get(name)
        if name in text_fields and value is not None and not isinstance(value, str):
            if name == 'title':
                raise ValidationError('title must be a string')
            logger.debug(f"Dropping non-string {name}: {type(value).__name__}")
            continue
        data[name] = value

    if 'is_featured' in data:
        data['is_featured'] = parse_bool(data['is_featured'])

    if raw_category_ids is not None:
        data['category_ids'] = normalize_category_ids(raw_category_ids)

    return data


def _check_file(field, file, max_size):
    filename = file.filename or ''
    ext = filename.rsplit('.', 1)[1].lower() if '.' in filename else ''
    if ext not in ALLOWED_EXTENSIONS[field]:
        allowed = ', '.join(sorted(ALLOWED_EXTENSIONS[field]))
        raise UploadRejected(f'{field}: file type not allowed. Allowed: {allowed}')

    file.stream.seek(0, 2)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise UploadRejected(f'File size exceeds the limit of {max_size} bytes')


def get_uploaded_files():
    """Collect and validate uploads. Violations terminate the request."""
    max_size = current_app.config['MAX_UPLOAD_SIZE']
    files = {}

    for slot in FILE_SLOTS:
        file = request.files.get(slot)
        if file and file.filename:
            _check_file(slot, file, max_size)
            files[slot] = file

    gallery = [file for file in request.files.getlist(GALLERY_FIELD) if file and file.filename]
    for file in gallery:
        _check_file(GALLERY_FIELD, file, max_size)
    if gallery:
        files[GALLERY_FIELD] = gallery

    return files
