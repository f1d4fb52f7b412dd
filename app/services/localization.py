"""Translation overlay for content records.

Records are plain dicts (``Post.to_dict()`` output). Two views are built
from the translations table:

- the preferred view: each translatable field replaced by the requested
  language's value when one exists, otherwise left at the base value;
- the full projection: one extra ``<key>_<tag>`` column per supported
  language, each falling back to the base value on its own.

Nothing here writes to the store or mutates its input.
"""

from app.constants import POST_MODULE, SUPPORTED_LANGUAGES, TRANSLATABLE_FIELDS, Language
from app.services.translations import find_translation, prefetch_translations


def store_lookup(module: str = POST_MODULE):
    """Lookup that asks the translation store for each slot."""
    def lookup(module_id, language, key):
        entry = find_translation(module, module_id, language, key)
        return entry.value if entry is not None else None
    return lookup


def prefetched_lookup(index: dict):
    """Lookup over a map built by ``prefetch_translations``."""
    def lookup(module_id, language, key):
        return index.get((module_id, int(language), key))
    return lookup


def preferred_view(record: dict, language: Language, lookup=None, fields=TRANSLATABLE_FIELDS) -> dict:
    lookup = lookup or store_lookup()
    localized = dict(record)
    for key in fields:
        value = lookup(record['id'], language, key)
        if value is not None:
            localized[key] = value
    return localized


def translated_columns(record: dict, lookup=None, fields=TRANSLATABLE_FIELDS) -> dict:
    """Only the suffixed columns, e.g. {'title_en': ..., 'title_ar': ...}."""
    lookup = lookup or store_lookup()
    columns = {}
    for language in SUPPORTED_LANGUAGES:
        for key in fields:
            value = lookup(record['id'], language, key)
            columns[f'{key}_{language.tag}'] = value if value is not None else record.get(key)
    return columns


def full_projection(record: dict, lookup=None, fields=TRANSLATABLE_FIELDS) -> dict:
    projected = dict(record)
    projected.update(translated_columns(record, lookup, fields))
    return projected


def localize(record: dict, language: Language, lookup=None) -> dict:
    """Preferred view first, then the suffixed columns.

    Suffixed columns are computed from the base record so a missing
    ``title_ar`` falls back to the base title, never to the requested
    language's title.
    """
    lookup = lookup or store_lookup()
    localized = preferred_view(record, language, lookup)
    localized.update(translated_columns(record, lookup))
    return localized


def localize_many(records, language: Language, module: str = POST_MODULE) -> list:
    """Localize a batch. Output order matches input order."""
    records = list(records)
    if not records:
        return []

    index = prefetch_translations(module, {record['id'] for record in records})
    lookup = prefetched_lookup(index)
    return [localize(record, language, lookup) for record in records]
