"""Counts shown on the admin dashboard."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from farmer_social.models import Post, PostStatus, User, UserRole

RECENT_POSTS_LIMIT = 5


def _count(db: Session, model: type[Any], *criteria: Any) -> int:
    return db.scalar(select(func.count()).select_from(model).where(*criteria)) or 0


def collect_statistics(db: Session) -> dict[str, Any]:
    """Return user counts by role, active post counts by status, and the newest posts."""
    active = Post.is_active.is_(True)
    recent_posts = list(
        db.scalars(
            select(Post)
            .where(active)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(RECENT_POSTS_LIMIT)
        ).unique()
    )
    return {
        "users": {
            "total": _count(db, User),
            "admin": _count(db, User, User.role == UserRole.ADMIN.value),
            "registered": _count(db, User, User.role == UserRole.REGISTERED.value),
        },
        "posts": {
            "total": _count(db, Post, active),
            "pending": _count(db, Post, active, Post.status == PostStatus.PENDING.value),
            "approved": _count(db, Post, active, Post.status == PostStatus.APPROVED.value),
            # Rejected posts are always inactive.
            "rejected": _count(db, Post, Post.status == PostStatus.REJECTED.value),
        },
        "recent_posts": recent_posts,
    }
