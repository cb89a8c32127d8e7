"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    comments_router,
    notifications_router,
    posts_router,
)

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "notifications_router",
    "admin_router",
]
