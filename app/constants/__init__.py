"""Shared constants for the application."""

from app.constants.languages import (
    Language,
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    resolve_language,
    input_field_name,
)
from app.constants.content import (
    POST_MODULE,
    TRANSLATABLE_FIELDS,
    FILE_SLOTS,
    GALLERY_FIELD,
    GALLERY_FOLDER,
    BASE_FIELDS,
)

__all__ = [
    'Language',
    'DEFAULT_LANGUAGE',
    'SUPPORTED_LANGUAGES',
    'resolve_language',
    'input_field_name',
    'POST_MODULE',
    'TRANSLATABLE_FIELDS',
    'FILE_SLOTS',
    'GALLERY_FIELD',
    'GALLERY_FOLDER',
    'BASE_FIELDS',
]
