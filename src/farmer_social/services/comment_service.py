"""Comments on approved posts, one level of replies, and comment likes."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from farmer_social.core.errors import AuthorizationError, NotFoundError, PostNotApprovedError
from farmer_social.core.security import Identity
from farmer_social.models import Comment, CommentLike, NotificationType, PostStatus
from farmer_social.repositories import (
    CommentRepository,
    LikeResult,
    PostRepository,
    toggle_like,
)
from farmer_social.schemas.comment import CommentCreate

from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class CommentService:
    """Business logic for comment threads."""

    def __init__(self, db: Session, notifier: NotificationService | None = None) -> None:
        self.db = db
        self.comments = CommentRepository(db)
        self.posts = PostRepository(db)
        self.notifier = notifier or NotificationService(db)

    def _get_active(self, comment_id: int) -> Comment:
        comment = self.comments.get_active(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def _get_owned(self, author: Identity, comment_id: int, action: str) -> Comment:
        comment = self._get_active(comment_id)
        if comment.author_id != author.id:
            raise AuthorizationError(f"Not authorized to {action} this comment")
        return comment

    def add_comment(self, author: Identity, data: CommentCreate) -> Comment:
        """Attach a comment (or reply) to an approved post and notify the people involved.

        A reply to a reply is stored under the thread's top-level comment;
        the ``reply`` notification still goes to whoever wrote the comment
        being answered.

        Raises:
            NotFoundError: If the post or the parent comment does not exist.
            PostNotApprovedError: If the post is not approved and active.
        """
        post = self.posts.get_by_id(data.post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if post.status != PostStatus.APPROVED or not post.is_active:
            raise PostNotApprovedError()

        answered: Comment | None = None
        thread_root_id: int | None = None
        if data.parent_comment_id is not None:
            answered = self.comments.get_active(data.parent_comment_id)
            if answered is None or answered.post_id != post.id:
                raise NotFoundError("Parent comment not found")
            thread_root_id = answered.parent_comment_id or answered.id
            if thread_root_id != answered.id and self.comments.get_active(thread_root_id) is None:
                raise NotFoundError("Parent comment not found")

        comment = self.comments.create(
            content=data.content,
            post_id=post.id,
            author_id=author.id,
            parent_comment_id=thread_root_id,
        )
        self.posts.increment_comments(post.id)
        self.db.commit()
        self.db.refresh(comment)
        logger.debug("User %s commented on post %s (comment %s)", author.id, post.id, comment.id)

        if post.author_id != author.id:
            self.notifier.notify(
                post.author_id,
                NotificationType.COMMENT,
                "New Comment",
                f'{author.username} commented on your post "{post.title}"',
                related_post_id=post.id,
                related_comment_id=comment.id,
                actor_id=author.id,
            )
        if answered is not None and answered.author_id != author.id:
            self.notifier.notify(
                answered.author_id,
                NotificationType.REPLY,
                "New Reply",
                f"{author.username} replied to your comment",
                related_post_id=post.id,
                related_comment_id=comment.id,
                actor_id=author.id,
            )
        return comment

    def list_for_post(
        self,
        post_id: int,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[tuple[Comment, list[Comment]]], int]:
        """Return ``([(comment, replies), ...], total_top_level)`` for one page."""
        if self.posts.get_by_id(post_id) is None:
            raise NotFoundError("Post not found")

        top_level = self.comments.top_level_for_post(post_id, page=page, limit=limit)
        replies = self.comments.replies_for([comment.id for comment in top_level])
        threads = [(comment, replies[comment.id]) for comment in top_level]
        return threads, self.comments.count_top_level(post_id)

    def update_comment(self, author: Identity, comment_id: int, content: str) -> Comment:
        comment = self._get_owned(author, comment_id, "update")
        comment.content = content
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def delete_comment(self, author: Identity, comment_id: int) -> None:
        """Soft-delete the author's comment and decrement the post's counter.

        Deleting a top-level comment takes its active replies with it, and the
        counter drops by every comment hidden.
        """
        comment = self._get_owned(author, comment_id, "delete")
        comment.is_active = False
        removed = 1
        if comment.parent_comment_id is None:
            removed += self.comments.deactivate_replies(comment.id)
        self.posts.decrement_comments(comment.post_id, by=removed)
        self.db.commit()

    def toggle_like(self, comment_id: int, user: Identity) -> LikeResult:
        comment = self._get_active(comment_id)
        result = toggle_like(self.db, CommentLike, comment.id, user.id)
        self.db.commit()
        self.db.expire(comment, ["likes"])
        return result
