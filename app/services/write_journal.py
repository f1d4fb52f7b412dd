"""Unit of work for multi-step post writes.

The relational store gives no transaction spanning the post row, its
translations, category links, media rows and stored files. A
WriteJournal records which steps committed, which failed, and how to undo
each committed step, so a partial write can be reported precisely and
compensated on request.
"""

import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class WriteJournal:

    def __init__(self, operation: str, post_id: int | None = None):
        self.operation = operation
        self.post_id = post_id
        self.completed = []
        self.failures = []
        self._compensations = []

    @property
    def ok(self) -> bool:
        return not self.failures

    def record(self, step: str, compensate=None):
        """Mark ``step`` committed; ``compensate`` undoes it."""
        self.completed.append(step)
        if compensate is not None:
            self._compensations.append((step, compensate))
        logger.debug(f"{self.operation} post={self.post_id}: {step} done")

    def add_compensation(self, step: str, compensate):
        self._compensations.append((step, compensate))

    def fail(self, step: str, error: Exception):
        self.failures.append({'step': step, 'error': str(error)})
        logger.error(f"{self.operation} post={self.post_id}: {step} failed: {error}")

    @contextmanager
    def step(self, name: str):
        """Run a block as one step; failures are recorded then re-raised."""
        try:
            yield
        except Exception as e:
            self.fail(name, e)
            raise
        self.record(name)

    def compensate(self) -> list:
        """Run recorded compensations newest first.

        Returns the compensation failures; an empty list means every
        recorded step was undone.
        """
        errors = []
        while self._compensations:
            step, action = self._compensations.pop()
            try:
                action()
                logger.info(f"{self.operation} post={self.post_id}: compensated {step}")
            except Exception as e:
                logger.error(f"{self.operation} post={self.post_id}: compensating {step} failed: {e}")
                errors.append({'step': step, 'error': str(e)})
        return errors

    def to_dict(self):
        return {
            'operation': self.operation,
            'post_id': self.post_id,
            'completed': list(self.completed),
            'failures': list(self.failures),
        }
