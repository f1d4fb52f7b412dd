"""Post model: the localized content record."""

from datetime import datetime
from app import db


post_categories = db.Table(
    'post_categories',
    db.Column('post_id', db.Integer, db.ForeignKey('posts.id', ondelete='CASCADE'), primary_key=True),
    db.Column('category_id', db.Integer, db.ForeignKey('categories.id', ondelete='CASCADE'), primary_key=True),
)


class Post(db.Model):
    """Content record.

    ``title`` and ``description`` hold the default-language values; other
    languages live in the translations table. File columns hold URLs
    returned by the storage service.
    """

    __tablename__ = 'posts'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    url = db.Column(db.String(500), nullable=True)
    date = db.Column(db.String(20), nullable=True)
    time = db.Column(db.String(20), nullable=True)
    video = db.Column(db.String(500), nullable=True)
    audio = db.Column(db.String(500), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    pdf = db.Column(db.String(500), nullable=True)
    is_featured = db.Column(db.Boolean, default=False, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    categories = db.relationship(
        'Category',
        secondary=post_categories,
        lazy='selectin',
        order_by='Category.id',
        backref=db.backref('posts', lazy='dynamic')
    )

    # Gallery rows are matched by (module, module_id); read-only so deleting
    # a post never touches them implicitly.
    images = db.relationship(
        'Media',
        primaryjoin="and_(foreign(Media.module_id) == Post.id, Media.module == 'post')",
        viewonly=True,
        lazy='selectin',
        order_by='Media.id'
    )

    def to_dict(self):
        """Convert post to dictionary with its gallery and categories."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'url': self.url,
            'date': self.date,
            'time': self.time,
            'video': self.video,
            'audio': self.audio,
            'image': self.image,
            'pdf': self.pdf,
            'is_featured': self.is_featured,
            'images': [media.to_dict() for media in self.images],
            'categories': [category.to_dict() for category in self.categories],
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }

    def __repr__(self):
        return f'<Post {self.id}: {self.title}>'
