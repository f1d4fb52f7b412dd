"""Supported content languages.

The set is closed: language ids are stored in ``translations.language_id``
and the tags name the suffixed output columns (``title_en``, ``title_ar``).
"""

from enum import IntEnum


class Language(IntEnum):
    EN = 1
    AR = 2

    @property
    def tag(self) -> str:
        return self.name.lower()


# Base (untranslated) column values are written in this language
DEFAULT_LANGUAGE = Language.EN

SUPPORTED_LANGUAGES = tuple(Language)


def resolve_language(value) -> Language:
    """Resolve a header/query value to a Language.

    Accepts a member, an int id, a numeric string ('2') or a tag ('ar').
    Missing or unrecognized values fall back to DEFAULT_LANGUAGE.
    """
    if isinstance(value, Language):
        return value
    if value is None or isinstance(value, bool):
        return DEFAULT_LANGUAGE

    if isinstance(value, str):
        value = value.strip().lower()
        for language in Language:
            if value == language.tag:
                return language
        if not value.isdigit():
            return DEFAULT_LANGUAGE

    try:
        return Language(int(value))
    except (TypeError, ValueError):
        return DEFAULT_LANGUAGE


def input_field_name(key: str, language: Language) -> str:
    """Name of the draft field carrying ``key`` in ``language``.

    The default language uses the bare key, every other language the
    suffixed name (``title_ar``).
    """
    if language == DEFAULT_LANGUAGE:
        return key
    return f'{key}_{language.tag}'
