# tests/v1/test_moderation.py
"""Tests for the post moderation state machine and admin moderation routes."""

import pytest
from fastapi import status
from sqlalchemy import select

from farmer_social.core.errors import (
    AuthorizationError,
    InvalidTransitionError,
    MissingModerationNoteError,
    NotFoundError,
    ValidationError,
)
from farmer_social.core.security import Identity
from farmer_social.models import Notification, PostStatus
from farmer_social.schemas.post import PostCreate
from farmer_social.services import ModerationService


@pytest.fixture()
def moderation(db_session, notifier):
    return ModerationService(db_session, notifier)


def _notifications_for(db_session, user):
    return list(
        db_session.scalars(select(Notification).where(Notification.recipient_id == user.id))
    )


class TestTransitions:
    def test_submit_starts_pending(self, moderation, test_user):
        post = moderation.submit(
            Identity.from_user(test_user),
            PostCreate(title="  Seed swap  ", content="Swapping heirloom beans this weekend."),
        )
        assert post.status == PostStatus.PENDING
        assert post.title == "Seed swap"
        assert post.is_active
        assert post.views_count == 0

    def test_approve_stamps_moderator_and_notifies(
        self, moderation, db_session, test_post, admin_user, test_user
    ):
        post = moderation.approve(Identity.from_user(admin_user), test_post.id, "Looks good")

        assert post.status == PostStatus.APPROVED
        assert post.moderated_by_id == admin_user.id
        assert post.moderated_at is not None
        assert post.moderation_note == "Looks good"

        (notification,) = _notifications_for(db_session, test_user)
        assert notification.type == "post_approved"
        assert notification.message == (
            f'Your post "{test_post.title}" has been approved and is now visible in the feed.'
        )

    def test_reject_requires_note(self, moderation, test_post, admin_user):
        admin = Identity.from_user(admin_user)
        for note in (None, "", "   "):
            with pytest.raises(MissingModerationNoteError) as exc_info:
                moderation.reject(admin, test_post.id, note)
            assert isinstance(exc_info.value, ValidationError)

    def test_note_is_checked_before_lookup(self, moderation, admin_user):
        with pytest.raises(MissingModerationNoteError):
            moderation.reject(Identity.from_user(admin_user), 123456, None)

    def test_reject_with_spam_note(self, moderation, db_session, test_post, admin_user, test_user):
        post = moderation.reject(Identity.from_user(admin_user), test_post.id, "spam")

        assert post.status == PostStatus.REJECTED
        assert post.is_active is False
        assert post.moderation_note == "spam"

        (notification,) = _notifications_for(db_session, test_user)
        assert notification.type == "post_rejected"
        assert "spam" in notification.message

    @pytest.mark.parametrize("final", [PostStatus.APPROVED, PostStatus.REJECTED])
    def test_terminal_states_cannot_move(self, moderation, make_post, test_user, admin_user, final):
        post = make_post(test_user, status=final)
        admin = Identity.from_user(admin_user)

        with pytest.raises(InvalidTransitionError):
            moderation.approve(admin, post.id)
        with pytest.raises(InvalidTransitionError):
            moderation.reject(admin, post.id, "spam")

    def test_missing_post(self, moderation, admin_user):
        with pytest.raises(NotFoundError):
            moderation.approve(Identity.from_user(admin_user), 987654)


class TestVisibility:
    def test_approved_is_visible_to_everyone(self, approved_post, other_user):
        assert ModerationService.visible_to(approved_post, None)
        assert ModerationService.visible_to(approved_post, Identity.from_user(other_user))

    @pytest.mark.parametrize("post_status", [PostStatus.PENDING, PostStatus.REJECTED])
    def test_unapproved_hidden_from_strangers(
        self, make_post, test_user, other_user, admin_user, post_status
    ):
        post = make_post(test_user, status=post_status)
        assert not ModerationService.visible_to(post, None)
        assert not ModerationService.visible_to(post, Identity.from_user(other_user))
        assert ModerationService.visible_to(post, Identity.from_user(test_user))
        assert ModerationService.visible_to(post, Identity.from_user(admin_user))

    def test_moderator_role_counts_as_staff(self, test_post):
        moderator = Identity(id=999, username="mod", email="mod@example.com", role="moderator")
        assert ModerationService.visible_to(test_post, moderator)

    def test_get_post_counts_views(self, moderation, approved_post):
        moderation.get_post(approved_post.id, None)
        post = moderation.get_post(approved_post.id, None)
        assert post.views_count == 2

    def test_get_pending_post_as_stranger(self, moderation, test_post, other_user):
        with pytest.raises(AuthorizationError) as exc_info:
            moderation.get_post(test_post.id, Identity.from_user(other_user))
        assert exc_info.value.message == "This post is not available"

    def test_get_inactive_post_as_stranger(self, moderation, make_post, test_user, other_user):
        post = make_post(test_user, status=PostStatus.APPROVED, is_active=False)
        with pytest.raises(NotFoundError):
            moderation.get_post(post.id, Identity.from_user(other_user))
        assert moderation.get_post(post.id, Identity.from_user(test_user)).id == post.id


class TestAdminRoutes:
    def test_pending_queue(self, client, admin_auth_token, test_post, approved_post):
        response = client.get("/api/v1/admin/posts/pending", headers=admin_auth_token)
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [post["id"] for post in body["posts"]] == [test_post.id]
        assert body["pagination"]["total"] == 1

    def test_approve_without_body(self, client, admin_auth_token, test_post):
        response = client.put(
            f"/api/v1/admin/posts/{test_post.id}/approve", headers=admin_auth_token
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["post"]["status"] == "approved"

    def test_reject_without_note(self, client, admin_auth_token, test_post):
        response = client.put(
            f"/api/v1/admin/posts/{test_post.id}/reject",
            json={},
            headers=admin_auth_token,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "ValidationError"

    def test_reject_with_note(self, client, admin_auth_token, test_post):
        response = client.put(
            f"/api/v1/admin/posts/{test_post.id}/reject",
            json={"moderation_note": "Off topic"},
            headers=admin_auth_token,
        )
        assert response.status_code == status.HTTP_200_OK
        post = response.json()["post"]
        assert post["status"] == "rejected"
        assert post["is_active"] is False
        assert post["moderation_note"] == "Off topic"

    def test_reject_accepts_camel_case_note(self, client, admin_auth_token, test_post):
        response = client.put(
            f"/api/v1/admin/posts/{test_post.id}/reject",
            json={"moderationNote": "Duplicate of another post"},
            headers=admin_auth_token,
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["post"]["moderation_note"] == "Duplicate of another post"

    def test_second_decision_is_invalid(self, client, admin_auth_token, approved_post):
        response = client.put(
            f"/api/v1/admin/posts/{approved_post.id}/reject",
            json={"moderation_note": "Too late"},
            headers=admin_auth_token,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "InvalidTransitionError"

    def test_registered_user_cannot_moderate(self, client, other_auth_token, test_post):
        response = client.put(
            f"/api/v1/admin/posts/{test_post.id}/approve", headers=other_auth_token
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
