"""Post lifecycle: submission, moderation, visibility, likes and listings."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from farmer_social.core.errors import (
    AuthorizationError,
    InvalidTransitionError,
    MissingModerationNoteError,
    NotFoundError,
)
from farmer_social.core.security import Identity
from farmer_social.db.time import utcnow
from farmer_social.models import NotificationType, Post, PostLike, PostStatus
from farmer_social.repositories import LikeResult, PostRepository, toggle_like
from farmer_social.schemas.post import PostCreate, PostUpdate

from .notification_service import NotificationService

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


class ModerationService:
    """Drives posts through ``pending -> approved | rejected``.

    Every mutation commits its own change before any notification is
    emitted, so a failed notification never undoes the transition.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.notifier = notifier or NotificationService(db)

    def _get(self, post_id: int) -> Post:
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def _get_pending(self, post_id: int) -> Post:
        post = self._get(post_id)
        if post.status != PostStatus.PENDING:
            raise InvalidTransitionError("Post has already been moderated")
        return post

    def submit(self, author: Identity, data: PostCreate) -> Post:
        """Create a post in the ``pending`` state."""
        post = self.posts.create(
            title=data.title,
            content=data.content,
            category=data.category,
            images=list(data.images),
            author_id=author.id,
            status=PostStatus.PENDING.value,
        )
        self.db.commit()
        self.db.refresh(post)
        logger.info("User %s submitted post %s for moderation", author.id, post.id)
        return post

    def approve(self, moderator: Identity, post_id: int, note: str | None = None) -> Post:
        """Move a pending post to ``approved`` and tell its author.

        Raises:
            NotFoundError: If the post does not exist.
            InvalidTransitionError: If the post is no longer pending.
        """
        post = self._get_pending(post_id)
        post.status = PostStatus.APPROVED.value
        post.moderated_by_id = moderator.id
        post.moderated_at = utcnow()
        post.moderation_note = note or None
        self.db.commit()
        logger.info("Post %s approved by user %s", post.id, moderator.id)

        self.notifier.notify(
            post.author_id,
            NotificationType.POST_APPROVED,
            "Post Approved",
            f'Your post "{post.title}" has been approved and is now visible in the feed.',
            related_post_id=post.id,
            actor_id=moderator.id,
        )
        return post

    def reject(self, moderator: Identity, post_id: int, note: str | None) -> Post:
        """Move a pending post to ``rejected``, hide it, and tell its author why.

        Raises:
            MissingModerationNoteError: If ``note`` is missing or blank.
            NotFoundError: If the post does not exist.
            InvalidTransitionError: If the post is no longer pending.
        """
        if note is None or not note.strip():
            raise MissingModerationNoteError("Moderation note is required for rejection")
        note = note.strip()

        post = self._get_pending(post_id)
        post.status = PostStatus.REJECTED.value
        post.is_active = False
        post.moderated_by_id = moderator.id
        post.moderated_at = utcnow()
        post.moderation_note = note
        self.db.commit()
        logger.info("Post %s rejected by user %s", post.id, moderator.id)

        self.notifier.notify(
            post.author_id,
            NotificationType.POST_REJECTED,
            "Post Rejected",
            f'Your post "{post.title}" has been rejected. Reason: {note}',
            related_post_id=post.id,
            actor_id=moderator.id,
        )
        return post

    @staticmethod
    def visible_to(post: Post, viewer: Identity | None) -> bool:
        """Approved posts are public; others only reach their author and staff."""
        if post.status == PostStatus.APPROVED:
            return True
        if viewer is None:
            return False
        return viewer.id == post.author_id or viewer.is_staff

    def get_post(self, post_id: int, viewer: Identity | None) -> Post:
        """Return a post the viewer may see and count the view.

        Raises:
            NotFoundError: If the post is missing, or inactive and the viewer
                is neither its author nor staff.
            AuthorizationError: If the post exists but is not visible to the viewer.
        """
        post = self._get(post_id)
        is_owner_or_staff = viewer is not None and (
            viewer.id == post.author_id or viewer.is_staff
        )
        if not post.is_active and not is_owner_or_staff:
            raise NotFoundError("Post not found")
        if not self.visible_to(post, viewer):
            raise AuthorizationError("This post is not available")

        self.posts.increment_views(post.id)
        self.db.commit()
        self.db.refresh(post)
        return post

    def edit(self, author: Identity, post_id: int, data: PostUpdate) -> Post:
        """Apply the sent fields to the author's own pending post."""
        post = self._get(post_id)
        if post.author_id != author.id:
            raise AuthorizationError("Not authorized to update this post")
        if post.status != PostStatus.PENDING:
            raise InvalidTransitionError("Only pending posts can be edited")

        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(post, field, value)
        self.db.commit()
        self.db.refresh(post)
        return post

    def soft_delete(self, author: Identity, post_id: int) -> None:
        """Hide the author's post. Its moderation status is left as is."""
        post = self._get(post_id)
        if post.author_id != author.id:
            raise AuthorizationError("Not authorized to delete this post")
        post.is_active = False
        self.db.commit()
        logger.info("Post %s deleted by its author %s", post.id, author.id)

    def toggle_like(self, post_id: int, user: Identity) -> LikeResult:
        """Like or unlike an active post; a new like notifies the author."""
        post = self._get(post_id)
        if not post.is_active:
            raise NotFoundError("Post not found")

        result = toggle_like(self.db, PostLike, post.id, user.id)
        self.db.commit()
        self.db.expire(post, ["likes"])

        if result.action == "liked" and post.author_id != user.id:
            self.notifier.notify(
                post.author_id,
                NotificationType.LIKE,
                "New Like",
                f'{user.username} liked your post "{post.title}"',
                related_post_id=post.id,
                actor_id=user.id,
            )
        return result

    def feed(
        self,
        *,
        category: str | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
    ) -> tuple[list[Post], int]:
        """Approved, active posts; returns one page and the total."""
        criteria = [Post.status == PostStatus.APPROVED.value, Post.is_active.is_(True)]
        if category:
            criteria.append(Post.category == category)
        return (
            self.posts.find(*criteria, page=page, limit=limit, sort_by=sort_by),
            self.posts.count(*criteria),
        )

    def list_for_author(
        self,
        author: Identity,
        *,
        status: str = PostStatus.PENDING.value,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Post], int]:
        """The caller's own active posts, filtered by status unless ``status="all"``."""
        criteria = [Post.author_id == author.id, Post.is_active.is_(True)]
        if status != ALL_STATUSES:
            criteria.append(Post.status == status)
        return (
            self.posts.find(*criteria, page=page, limit=limit),
            self.posts.count(*criteria),
        )

    def list_by_user(self, user_id: int, *, page: int = 1, limit: int = 10) -> tuple[list[Post], int]:
        criteria = [
            Post.author_id == user_id,
            Post.status == PostStatus.APPROVED.value,
            Post.is_active.is_(True),
        ]
        return (
            self.posts.find(*criteria, page=page, limit=limit),
            self.posts.count(*criteria),
        )

    def pending_queue(self, *, page: int = 1, limit: int = 10) -> tuple[list[Post], int]:
        """Posts awaiting moderation, oldest first."""
        criteria = [Post.status == PostStatus.PENDING.value, Post.is_active.is_(True)]
        posts = self.posts.find(*criteria, page=page, limit=limit, ascending=True)
        return posts, self.posts.count(*criteria)
