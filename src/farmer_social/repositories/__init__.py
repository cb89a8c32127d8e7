"""Data access helpers over the injected SQLAlchemy session."""

from .comment_repo import CommentRepository
from .likes import LikeResult, toggle_like
from .post_repo import PostRepository
from .token_repo import RefreshTokenRepository

__all__ = [
    "CommentRepository",
    "LikeResult",
    "PostRepository",
    "RefreshTokenRepository",
    "toggle_like",
]
