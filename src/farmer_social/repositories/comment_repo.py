"""Data access helpers for comments and their replies."""
from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from farmer_social.models.comment import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def get_active(self, comment_id: int) -> Comment | None:
        comment = self.get_by_id(comment_id)
        if comment is None or not comment.is_active:
            return None
        return comment

    def create(self, *, content: str, post_id: int, author_id: int, parent_comment_id: int | None) -> Comment:
        comment = Comment(
            content=content,
            post_id=post_id,
            author_id=author_id,
            parent_comment_id=parent_comment_id,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def top_level_for_post(self, post_id: int, *, page: int, limit: int) -> list[Comment]:
        """Return one page of active top-level comments, oldest first."""
        stmt = (
            select(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.parent_comment_id.is_(None),
                Comment.is_active.is_(True),
            )
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self.session.scalars(stmt).unique())

    def count_top_level(self, post_id: int) -> int:
        return self.session.scalar(
            select(func.count())
            .select_from(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.parent_comment_id.is_(None),
                Comment.is_active.is_(True),
            )
        ) or 0

    def replies_for(self, parent_ids: list[int]) -> dict[int, list[Comment]]:
        """Return active replies grouped by parent id, oldest first."""
        grouped: dict[int, list[Comment]] = {parent_id: [] for parent_id in parent_ids}
        if not parent_ids:
            return grouped
        stmt = (
            select(Comment)
            .where(Comment.parent_comment_id.in_(parent_ids), Comment.is_active.is_(True))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        for reply in self.session.scalars(stmt).unique():
            grouped[reply.parent_comment_id].append(reply)  # type: ignore[index]
        return grouped

    def deactivate_replies(self, parent_id: int) -> int:
        """Soft-delete the active replies of a top-level comment; returns how many."""
        result = self.session.execute(
            update(Comment)
            .where(Comment.parent_comment_id == parent_id, Comment.is_active.is_(True))
            .values(is_active=False)
        )
        return result.rowcount
