"""Translation model: one localized value for one field of one record."""

from datetime import datetime
from app import db


class Translation(db.Model):
    """Per-language value of a translatable field.

    Rows are keyed generically by (module, module_id) instead of a typed
    foreign key, so any entity type can own translations.
    """

    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    module = db.Column(db.String(50), nullable=False)
    module_id = db.Column(db.Integer, nullable=False)
    language_id = db.Column(db.Integer, nullable=False)
    key = db.Column(db.String(50), nullable=False)
    value = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # At most one value per (module, record, language, field)
    __table_args__ = (
        db.UniqueConstraint('module', 'module_id', 'language_id', 'key', name='unique_translation_slot'),
        db.Index('ix_translations_owner', 'module', 'module_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'module': self.module,
            'module_id': self.module_id,
            'language_id': self.language_id,
            'key': self.key,
            'value': self.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Translation {self.module}:{self.module_id} {self.language_id}/{self.key}>'
