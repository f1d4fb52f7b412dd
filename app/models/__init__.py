"""Database models for the content backend."""

from .user import User
from .category import Category
from .post import Post, post_categories
from .translation import Translation
from .media import Media
from .favourite import FavouritePost
from .post_history import UserPostHistory
from .faq import Faq

__all__ = [
    'User',
    'Category',
    'Post',
    'post_categories',
    'Translation',
    'Media',
    'FavouritePost',
    'UserPostHistory',
    'Faq',
]
