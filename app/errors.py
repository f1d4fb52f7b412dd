"""Exception taxonomy for the content backend and the Flask handlers that
render it as structured outcomes ({success, message, data})."""

import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ContentError(Exception):
    """Base exception for the content backend."""

    status_code = 400
    code = 'CONTENT_ERROR'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self):
        return {
            'success': False,
            'code': self.code,
            'message': self.message,
            'data': [],
        }


class NotFoundError(ContentError):
    """A referenced post, category, user or translation does not exist."""

    status_code = 404
    code = 'NOT_FOUND'


class ValidationError(ContentError):
    """Malformed input that cannot be dropped (e.g. a missing required field)."""

    status_code = 400
    code = 'VALIDATION_ERROR'


class UploadRejected(ValidationError):
    """Uploaded file has a disallowed type or exceeds the size limit."""

    code = 'UPLOAD_REJECTED'


class FileStorageError(ContentError):
    """The file-storage collaborator failed to save or delete bytes."""

    status_code = 502
    code = 'FILE_STORAGE_ERROR'


class StoreUnavailable(ContentError):
    """A call into the relational store failed."""

    status_code = 503
    code = 'STORE_UNAVAILABLE'


class PartialWriteFailure(ContentError):
    """A later step of a multi-step write failed after earlier steps committed.

    Nothing is rolled back. ``journal`` lists what completed and what failed,
    and ``journal.compensate()`` can undo the recorded steps if the caller
    decides to.
    """

    status_code = 207
    code = 'PARTIAL_WRITE'

    def __init__(self, message: str, journal, post=None):
        super().__init__(message)
        self.journal = journal
        self.post = post

    def to_dict(self):
        return {
            'success': False,
            'code': self.code,
            'message': self.message,
            'data': {
                'post': self.post,
                'journal': self.journal.to_dict(),
            },
        }


def register_error_handlers(app):
    """Register exception handlers with the Flask app."""

    @app.errorhandler(PartialWriteFailure)
    def handle_partial_write(e):
        logger.error(f"Partial write: {e.message} ({e.journal.failures})")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ContentError)
    def handle_content_error(e):
        if e.status_code >= 500:
            logger.error(f"{e.code}: {e.message}")
        else:
            logger.info(f"{e.code}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({
            'success': False,
            'code': e.name.upper().replace(' ', '_'),
            'message': e.description,
            'data': [],
        }), e.code
