"""Favourite model: membership of a post in a user's favourites set."""

from datetime import datetime
from sqlalchemy.exc import IntegrityError
from app import db


class FavouritePost(db.Model):
    """One row per (user, post) pair in the user's favourites."""

    __tablename__ = 'favourite_posts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    # No foreign key: deleted posts are dropped when the set is read
    post_id = db.Column(db.Integer, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', backref=db.backref('favourite_posts', lazy='dynamic'))

    # Unique constraint to prevent duplicate favourites
    __table_args__ = (
        db.UniqueConstraint('user_id', 'post_id', name='unique_user_favourite_post'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'post_id': self.post_id,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def toggle(cls, user_id, post_id):
        """Toggle membership. Returns True when the post was added.

        Removal is a keyed delete and insertion relies on the unique
        constraint, so two concurrent adds leave exactly one row.
        """
        removed = cls.query.filter_by(user_id=user_id, post_id=post_id).delete()
        if removed:
            db.session.commit()
            return False

        db.session.add(cls(user_id=user_id, post_id=post_id))
        try:
            db.session.commit()
        except IntegrityError:
            # Another request inserted the same pair first
            db.session.rollback()
        return True

    @classmethod
    def post_ids_for(cls, user_id):
        """Post ids in the user's favourites, most recently added first."""
        rows = cls.query.filter_by(user_id=user_id).order_by(cls.created_at.desc(), cls.id.desc()).all()
        return [row.post_id for row in rows]
