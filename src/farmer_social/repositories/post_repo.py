"""Data access helpers for working with posts."""
from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, case, func, select, update
from sqlalchemy.orm import Session

from farmer_social.models.post import Post

__all__ = ["PostRepository", "SORTABLE_COLUMNS"]

SORTABLE_COLUMNS = {
    "createdAt": Post.created_at,
    "created_at": Post.created_at,
    "views": Post.views_count,
    "views_count": Post.views_count,
    "comments": Post.comments_count,
    "comments_count": Post.comments_count,
}


class PostRepository:
    """Thin wrapper around database access for post entities.

    Counter updates are single UPDATE statements and leave ``updated_at`` alone.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def create(self, **fields: Any) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(**fields)
        self.session.add(post)
        self.session.flush()
        return post

    def find(
        self,
        *criteria: ColumnElement[bool],
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        ascending: bool = False,
    ) -> list[Post]:
        """Return one page of posts matching ``criteria``, newest (or largest) first."""
        order_column = SORTABLE_COLUMNS.get(sort_by, Post.created_at)
        ordering = (
            (order_column.asc(), Post.id.asc())
            if ascending
            else (order_column.desc(), Post.id.desc())
        )
        stmt = (
            select(Post)
            .where(*criteria)
            .order_by(*ordering)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self.session.scalars(stmt).unique())

    def count(self, *criteria: ColumnElement[bool]) -> int:
        return self.session.scalar(select(func.count()).select_from(Post).where(*criteria)) or 0

    def increment_views(self, post_id: int) -> None:
        self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(views_count=Post.views_count + 1, updated_at=Post.updated_at)
        )

    def increment_comments(self, post_id: int) -> None:
        self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(comments_count=Post.comments_count + 1, updated_at=Post.updated_at)
        )

    def decrement_comments(self, post_id: int, by: int = 1) -> None:
        """Decrement the comment counter by ``by`` without letting it go below zero."""
        self.session.execute(
            update(Post)
            .where(Post.id == post_id, Post.comments_count > 0)
            .values(
                comments_count=case(
                    (Post.comments_count > by, Post.comments_count - by),
                    else_=0,
                ),
                updated_at=Post.updated_at,
            )
        )
