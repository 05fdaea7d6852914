"""
SQLAlchemy database models for the identity and authoring collaborators.

- base: Base declarative class
- user: User accounts
- post: Authored posts

Import any model from this module:
    from app.db.models import User, Post
"""

# Base class (must be imported first)
from .base import Base

from .user import User
from .post import Post

__all__ = [
    "Base",
    "User",
    "Post",
]
