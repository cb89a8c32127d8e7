"""Post-related endpoints for the Farmer Social API."""

from fastapi import APIRouter, Query, status

from farmer_social.api.v1.dependencies import (
    CurrentUserDep,
    ModerationServiceDep,
    OptionalUserDep,
)
from farmer_social.models import Post
from farmer_social.schemas.common import MessageResponse, Pagination
from farmer_social.schemas.post import (
    LikeResponse,
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

router = APIRouter(prefix="/posts", tags=["posts"])


def _post_page(posts: list[Post], *, page: int, limit: int, total: int) -> PostListResponse:
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/feed", response_model=PostListResponse)
async def get_feed(
    moderation: ModerationServiceDep,
    category: str | None = Query(None, max_length=50, description="Only posts in this category"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query(
        "createdAt",
        alias="sortBy",
        pattern="^(createdAt|created_at|views|views_count|comments|comments_count)$",
    ),
) -> PostListResponse:
    """Approved, active posts for everyone, newest first by default."""
    posts, total = moderation.feed(category=category, page=page, limit=limit, sort_by=sort_by)
    return _post_page(posts, page=page, limit=limit, total=total)


@router.get("/user/my-posts", response_model=PostListResponse)
async def get_my_posts(
    identity: CurrentUserDep,
    moderation: ModerationServiceDep,
    post_status: str = Query(
        "pending",
        alias="status",
        pattern="^(pending|approved|rejected|all)$",
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PostListResponse:
    """The caller's own active posts filtered by moderation status."""
    posts, total = moderation.list_for_author(identity, status=post_status, page=page, limit=limit)
    return _post_page(posts, page=page, limit=limit, total=total)


@router.get("/user/{user_id}", response_model=PostListResponse)
async def get_user_posts(
    user_id: int,
    moderation: ModerationServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PostListResponse:
    """Another user's approved posts."""
    posts, total = moderation.list_by_user(user_id, page=page, limit=limit)
    return _post_page(posts, page=page, limit=limit, total=total)


@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(
    post_id: int,
    moderation: ModerationServiceDep,
    viewer: OptionalUserDep,
) -> PostEnvelope:
    """Fetch one post and count the view.

    Pending and rejected posts are only shown to their author and staff.
    """
    post = moderation.get_post(post_id, viewer)
    return PostEnvelope(post=PostResponse.model_validate(post))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostEnvelope)
async def create_post(
    payload: PostCreate,
    identity: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> PostEnvelope:
    """Submit a post; it stays out of the feed until an admin approves it."""
    post = moderation.submit(identity, payload)
    return PostEnvelope(
        message="Post created successfully and is pending approval",
        post=PostResponse.model_validate(post),
    )


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    identity: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> PostEnvelope:
    post = moderation.edit(identity, post_id, payload)
    return PostEnvelope(message="Post updated successfully", post=PostResponse.model_validate(post))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    identity: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> MessageResponse:
    moderation.soft_delete(identity, post_id)
    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: int,
    identity: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> LikeResponse:
    """Toggle the caller's like on a post."""
    result = moderation.toggle_like(post_id, identity)
    return LikeResponse(
        message=f"Post {result.action} successfully",
        action=result.action,
        likes_count=result.likes_count,
    )
