"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .comments import router as comments_router
from .notifications import router as notifications_router
from .posts import router as posts_router

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "notifications_router",
    "admin_router",
]
