# src/farmer_social/models/__init__.py
"""SQLAlchemy models for the Farmer Social application."""

from .comment import Comment, CommentLike
from .notification import Notification, NotificationType
from .post import Post, PostLike, PostStatus
from .refresh_token import RefreshToken
from .user import User, UserRole

__all__ = [
    "Comment", "CommentLike",
    "Notification", "NotificationType",
    "Post", "PostLike", "PostStatus",
    "RefreshToken",
    "User", "UserRole",
]
