# tests/v1/test_comments.py
"""Tests for comments, one-level replies, counters and comment likes."""

import pytest
from fastapi import status
from sqlalchemy import select, update

from farmer_social.core.errors import NotFoundError, PostNotApprovedError
from farmer_social.core.security import Identity
from farmer_social.models import Comment, Notification, Post, PostStatus
from farmer_social.schemas.comment import CommentCreate
from farmer_social.services import CommentService

COMMENTS_URL = "/api/v1/comments"


@pytest.fixture()
def comments(db_session, notifier):
    return CommentService(db_session, notifier)


def _types_for(db_session, user) -> list[str]:
    return [
        n.type
        for n in db_session.scalars(
            select(Notification).where(Notification.recipient_id == user.id)
        )
    ]


class TestAddComment:
    def test_comment_increments_counter_and_notifies_author(
        self, comments, db_session, approved_post, test_user, other_user
    ):
        comments.add_comment(
            Identity.from_user(other_user),
            CommentCreate(content="Try copper spray early.", post_id=approved_post.id),
        )

        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 1
        assert _types_for(db_session, test_user) == ["comment"]
        assert _types_for(db_session, other_user) == []

    def test_reply_notifies_post_author_and_parent_author(
        self, comments, db_session, make_user, approved_post, test_user, other_user
    ):
        parent = comments.add_comment(
            Identity.from_user(other_user),
            CommentCreate(content="Try copper spray early.", post_id=approved_post.id),
        )
        replier = make_user("carol")
        comments.add_comment(
            Identity.from_user(replier),
            CommentCreate(
                content="Copper worked for us too.",
                post_id=approved_post.id,
                parent_comment_id=parent.id,
            ),
        )

        assert sorted(_types_for(db_session, test_user)) == ["comment", "comment"]
        assert _types_for(db_session, other_user) == ["reply"]
        assert _types_for(db_session, replier) == []

    def test_post_author_replying_to_commenter(
        self, comments, db_session, approved_post, test_user, other_user
    ):
        parent = comments.add_comment(
            Identity.from_user(other_user),
            CommentCreate(content="Which variety is this?", post_id=approved_post.id),
        )
        comments.add_comment(
            Identity.from_user(test_user),
            CommentCreate(
                content="San Marzano.", post_id=approved_post.id, parent_comment_id=parent.id
            ),
        )

        assert _types_for(db_session, test_user) == ["comment"]
        assert _types_for(db_session, other_user) == ["reply"]

    def test_reply_to_reply_is_stored_under_top_level(
        self, comments, db_session, make_user, approved_post, test_user, other_user
    ):
        top = comments.add_comment(
            Identity.from_user(other_user),
            CommentCreate(content="Top-level question", post_id=approved_post.id),
        )
        reply = comments.add_comment(
            Identity.from_user(test_user),
            CommentCreate(
                content="First answer", post_id=approved_post.id, parent_comment_id=top.id
            ),
        )
        carol = make_user("carol")
        nested = comments.add_comment(
            Identity.from_user(carol),
            CommentCreate(
                content="Answering the answer", post_id=approved_post.id, parent_comment_id=reply.id
            ),
        )

        assert nested.parent_comment_id == top.id
        # The reply notification goes to the author of the answered comment.
        assert "reply" in _types_for(db_session, test_user)

    def test_post_must_be_approved(self, comments, test_post, other_user):
        with pytest.raises(PostNotApprovedError):
            comments.add_comment(
                Identity.from_user(other_user),
                CommentCreate(content="Hello", post_id=test_post.id),
            )

    def test_missing_post(self, comments, other_user):
        with pytest.raises(NotFoundError) as exc_info:
            comments.add_comment(
                Identity.from_user(other_user), CommentCreate(content="Hello", post_id=98765)
            )
        assert not isinstance(exc_info.value, PostNotApprovedError)

    def test_parent_must_belong_to_same_post(
        self, comments, make_post, approved_post, test_user, other_user
    ):
        elsewhere = make_post(test_user, status=PostStatus.APPROVED)
        parent = comments.add_comment(
            Identity.from_user(other_user),
            CommentCreate(content="On the other post", post_id=elsewhere.id),
        )
        with pytest.raises(NotFoundError) as exc_info:
            comments.add_comment(
                Identity.from_user(other_user),
                CommentCreate(
                    content="Wrong thread",
                    post_id=approved_post.id,
                    parent_comment_id=parent.id,
                ),
            )
        assert exc_info.value.message == "Parent comment not found"

    def test_reply_under_deleted_thread_is_refused(
        self, comments, db_session, approved_post, test_user, other_user
    ):
        top = comments.add_comment(
            Identity.from_user(other_user),
            CommentCreate(content="Top-level question", post_id=approved_post.id),
        )
        reply = comments.add_comment(
            Identity.from_user(test_user),
            CommentCreate(
                content="First answer", post_id=approved_post.id, parent_comment_id=top.id
            ),
        )
        comments.delete_comment(Identity.from_user(other_user), top.id)

        with pytest.raises(NotFoundError) as exc_info:
            comments.add_comment(
                Identity.from_user(other_user),
                CommentCreate(
                    content="Answering the answer",
                    post_id=approved_post.id,
                    parent_comment_id=reply.id,
                ),
            )
        assert exc_info.value.message == "Parent comment not found"

        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 0


class TestCommentRoutes:
    def _create(self, client, headers, post_id, content="Nice harvest!", parent=None):
        return client.post(
            COMMENTS_URL,
            json={"content": content, "post_id": post_id, "parent_comment_id": parent},
            headers=headers,
        )

    def test_list_threads_oldest_first(self, client, other_auth_token, auth_token, approved_post):
        first = self._create(client, other_auth_token, approved_post.id, "First").json()["comment"]
        second = self._create(client, other_auth_token, approved_post.id, "Second").json()["comment"]
        reply = self._create(
            client, auth_token, approved_post.id, "Reply to first", parent=first["id"]
        ).json()["comment"]

        response = client.get(f"{COMMENTS_URL}/post/{approved_post.id}")
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [c["id"] for c in body["comments"]] == [first["id"], second["id"]]
        assert [r["id"] for r in body["comments"][0]["replies"]] == [reply["id"]]
        assert body["comments"][1]["replies"] == []
        assert body["pagination"]["total"] == 2

    def test_list_for_missing_post(self, client):
        response = client.get(f"{COMMENTS_URL}/post/55555")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_comment_on_pending_post(self, client, other_auth_token, test_post):
        response = self._create(client, other_auth_token, test_post.id)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Post not found or not approved"

    def test_update_by_author_only(self, client, auth_token, other_auth_token, approved_post):
        comment = self._create(client, other_auth_token, approved_post.id).json()["comment"]

        denied = client.put(
            f"{COMMENTS_URL}/{comment['id']}", json={"content": "Edited"}, headers=auth_token
        )
        assert denied.status_code == status.HTTP_403_FORBIDDEN

        allowed = client.put(
            f"{COMMENTS_URL}/{comment['id']}", json={"content": "Edited"}, headers=other_auth_token
        )
        assert allowed.status_code == status.HTTP_200_OK
        assert allowed.json()["comment"]["content"] == "Edited"

    def test_delete_twice_keeps_counter_at_zero(
        self, client, db_session, other_auth_token, approved_post
    ):
        comment = self._create(client, other_auth_token, approved_post.id).json()["comment"]
        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 1

        url = f"{COMMENTS_URL}/{comment['id']}"
        assert client.delete(url, headers=other_auth_token).status_code == status.HTTP_200_OK
        second = client.delete(url, headers=other_auth_token)
        assert second.status_code == status.HTTP_404_NOT_FOUND

        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 0
        assert db_session.get(Comment, comment["id"]).is_active is False

    def test_counter_never_negative(self, client, db_session, other_auth_token, approved_post):
        comment = self._create(client, other_auth_token, approved_post.id).json()["comment"]
        db_session.execute(
            update(Post).where(Post.id == approved_post.id).values(comments_count=0)
        )
        db_session.commit()

        client.delete(f"{COMMENTS_URL}/{comment['id']}", headers=other_auth_token)

        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 0

    def test_comment_like_toggle(self, client, auth_token, other_auth_token, approved_post):
        comment = self._create(client, other_auth_token, approved_post.id).json()["comment"]
        url = f"{COMMENTS_URL}/{comment['id']}/like"

        liked = client.post(url, headers=auth_token).json()
        assert (liked["action"], liked["likes_count"]) == ("liked", 1)
        unliked = client.post(url, headers=auth_token).json()
        assert (unliked["action"], unliked["likes_count"]) == ("unliked", 0)

    def test_deleting_thread_hides_and_uncounts_replies(
        self, client, db_session, auth_token, other_auth_token, approved_post
    ):
        top = self._create(client, other_auth_token, approved_post.id, "Top").json()["comment"]
        for text in ("Reply one", "Reply two"):
            self._create(client, auth_token, approved_post.id, text, parent=top["id"])
        kept = self._create(client, auth_token, approved_post.id, "Another thread").json()["comment"]

        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 4

        response = client.delete(f"{COMMENTS_URL}/{top['id']}", headers=other_auth_token)
        assert response.status_code == status.HTTP_200_OK

        listing = client.get(f"{COMMENTS_URL}/post/{approved_post.id}").json()
        assert [c["id"] for c in listing["comments"]] == [kept["id"]]
        db_session.expire_all()
        assert db_session.get(Post, approved_post.id).comments_count == 1
        assert db_session.scalars(
            select(Comment).where(
                Comment.parent_comment_id == top["id"], Comment.is_active.is_(True)
            )
        ).all() == []

    def test_camel_case_body_fields(self, client, auth_token, other_auth_token, approved_post):
        top = client.post(
            COMMENTS_URL,
            json={"content": "Which variety?", "postId": approved_post.id},
            headers=other_auth_token,
        )
        assert top.status_code == status.HTTP_201_CREATED
        top_id = top.json()["comment"]["id"]

        reply = client.post(
            COMMENTS_URL,
            json={
                "content": "San Marzano.",
                "postId": approved_post.id,
                "parentCommentId": top_id,
            },
            headers=auth_token,
        )
        assert reply.status_code == status.HTTP_201_CREATED
        assert reply.json()["comment"]["parent_comment_id"] == top_id
