"""File storage service for post uploads.

Two backends, picked by the STORAGE_BACKEND setting:
- local: files written under UPLOAD_FOLDER and served from /uploads/...
- supabase: files uploaded to the SUPABASE_BUCKET Storage bucket

Functions return (result, error_message) tuples instead of raising.
"""

import os
import logging
from uuid import uuid4
from typing import Optional, Tuple

from flask import current_app
from supabase import create_client

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = '/uploads/'

# Supabase client (lazy initialization)
_supabase_client = None


def get_supabase_client():
    """Get or create Supabase client (lazy initialization)."""
    global _supabase_client

    if _supabase_client is None:
        url = current_app.config.get('SUPABASE_URL')
        key = current_app.config.get('SUPABASE_SERVICE_KEY')

        if not url or not key:
            logger.warning('Supabase credentials not configured. Storage will not work.')
            return None

        try:
            _supabase_client = create_client(url, key)
            logger.info('Supabase client initialized successfully')
        except Exception as e:
            logger.error(f'Failed to initialize Supabase client: {e}')
            return None

    return _supabase_client


def _unique_name(file_name: str) -> str:
    ext = file_name.rsplit('.', 1)[-1].lower() if '.' in file_name else 'bin'
    return f"{uuid4().hex}.{ext}"


def _upload_local(folder: str, file_data: bytes, unique_name: str) -> str:
    target_dir = os.path.join(current_app.config['UPLOAD_FOLDER'], folder)
    os.makedirs(target_dir, exist_ok=True)
    with open(os.path.join(target_dir, unique_name), 'wb') as fh:
        fh.write(file_data)
    return f"{LOCAL_URL_PREFIX}{folder}/{unique_name}"


def _upload_supabase(folder: str, file_data: bytes, unique_name: str, content_type: str) -> str:
    client = get_supabase_client()
    if client is None:
        raise RuntimeError('Storage service not configured')

    bucket = current_app.config['SUPABASE_BUCKET']
    path = f"{folder}/{unique_name}"
    client.storage.from_(bucket).upload(
        path=path,
        file=file_data,
        file_options={"content-type": content_type}
    )
    return client.storage.from_(bucket).get_public_url(path)


def upload_file(
    folder: str,
    file_data: bytes,
    file_name: str,
    content_type: str = 'application/octet-stream'
) -> Tuple[Optional[str], Optional[str]]:
    """Store a file and return its URL.

    Args:
        folder: Sub-folder, e.g. 'posts/videos'
        file_data: Raw file bytes
        file_name: Original filename (used to get extension)
        content_type: MIME type of the file

    Returns:
        Tuple of (url, error_message)
        If successful: (url, None)
        If failed: (None, error_message)
    """
    unique_name = _unique_name(file_name)
    backend = current_app.config['STORAGE_BACKEND']

    logger.info(f'Uploading file to {backend}:{folder}/{unique_name} ({content_type})')
    try:
        if backend == 'supabase':
            url = _upload_supabase(folder, file_data, unique_name, content_type)
        else:
            url = _upload_local(folder, file_data, unique_name)
    except Exception as e:
        error_msg = str(e)
        logger.error(f'Upload failed: {error_msg}')
        return None, error_msg

    logger.info(f'File uploaded successfully: {url}')
    return url, None


def delete_file(file_url: str) -> Tuple[bool, Optional[str]]:
    """Delete a previously stored file.

    Args:
        file_url: URL returned by upload_file

    Returns:
        Tuple of (success, error_message)
    """
    if not file_url:
        return True, None

    backend = current_app.config['STORAGE_BACKEND']
    try:
        if backend == 'supabase':
            client = get_supabase_client()
            if client is None:
                return False, 'Storage service not configured'
            bucket = current_app.config['SUPABASE_BUCKET']
            # Public URLs end with /<bucket>/<folder>/<name>
            path = file_url.split(f'/{bucket}/', 1)[-1]
            client.storage.from_(bucket).remove([path])
        else:
            if not file_url.startswith(LOCAL_URL_PREFIX):
                return False, f'Not a local upload: {file_url}'
            relative = file_url[len(LOCAL_URL_PREFIX):]
            path = os.path.join(current_app.config['UPLOAD_FOLDER'], *relative.split('/'))
            if os.path.exists(path):
                os.remove(path)
    except Exception as e:
        error_msg = str(e)
        logger.error(f'Delete failed: {error_msg}')
        return False, error_msg

    logger.info(f'File deleted successfully: {file_url}')
    return True, None


def upload_post_file(folder: str, file) -> Tuple[Optional[str], Optional[str]]:
    """Upload a werkzeug FileStorage received with a post draft."""
    file.stream.seek(0)
    file_data = file.read()
    return upload_file(folder, file_data, file.filename or 'upload', file.mimetype or 'application/octet-stream')
