"""Shared utilities for the content backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from app.utils.auth import token_required, issue_token
from app.utils.responses import outcome
from app.utils.request_parsing import (
    normalize_category_ids,
    get_language,
    get_pagination,
    get_post_payload,
    get_uploaded_files,
)

__all__ = [
    'token_required',
    'issue_token',
    'outcome',
    'normalize_category_ids',
    'get_language',
    'get_pagination',
    'get_post_payload',
    'get_uploaded_files',
]
