"""Media model for auxiliary files (gallery images) attached to a record."""

from datetime import datetime
from app import db


class Media(db.Model):
    __tablename__ = 'media'

    id = db.Column(db.Integer, primary_key=True)
    module = db.Column(db.String(50), nullable=False)
    # No foreign key: owner rows are removed by the write orchestrator
    module_id = db.Column(db.Integer, nullable=False)
    url = db.Column(db.String(500), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index('ix_media_owner', 'module', 'module_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'module': self.module,
            'module_id': self.module_id,
            'url': self.url,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
