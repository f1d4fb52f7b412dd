"""Category model. Categories form a tree through ``parent_id``."""

from datetime import datetime
from app import db


class Category(db.Model):
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    parent_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    children = db.relationship(
        'Category',
        backref=db.backref('parent', remote_side=[id]),
        lazy='selectin',
        order_by='Category.id'
    )

    def to_dict(self, include_children=True):
        """Convert category to dictionary, children nested recursively."""
        result = {
            'id': self.id,
            'name': self.name,
            'parent_id': self.parent_id,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
        if include_children:
            result['children'] = [child.to_dict() for child in self.children]
        return result

    def __repr__(self):
        return f'<Category {self.id}: {self.name}>'
