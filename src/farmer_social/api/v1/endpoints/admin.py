"""Admin-only moderation and user management endpoints."""

from fastapi import APIRouter, Query

from farmer_social.api.v1.dependencies import (
    AdminDep,
    ModerationServiceDep,
    SessionDep,
    UserServiceDep,
)
from farmer_social.schemas.admin import Statistics, StatisticsResponse
from farmer_social.schemas.common import Pagination
from farmer_social.schemas.post import ModerationRequest, PostEnvelope, PostListResponse, PostResponse
from farmer_social.schemas.user import (
    RoleUpdateRequest,
    StatusUpdateRequest,
    UserEnvelope,
    UserListResponse,
    UserResponse,
)
from farmer_social.services import collect_statistics

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/posts/pending", response_model=PostListResponse)
async def list_pending_posts(
    admin: AdminDep,
    moderation: ModerationServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PostListResponse:
    """Posts waiting for a decision, oldest first."""
    posts, total = moderation.pending_queue(page=page, limit=limit)
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.put("/posts/{post_id}/approve", response_model=PostEnvelope)
async def approve_post(
    post_id: int,
    admin: AdminDep,
    moderation: ModerationServiceDep,
    payload: ModerationRequest | None = None,
) -> PostEnvelope:
    note = payload.moderation_note if payload else None
    post = moderation.approve(admin, post_id, note)
    return PostEnvelope(message="Post approved successfully", post=PostResponse.model_validate(post))


@router.put("/posts/{post_id}/reject", response_model=PostEnvelope)
async def reject_post(
    post_id: int,
    admin: AdminDep,
    moderation: ModerationServiceDep,
    payload: ModerationRequest | None = None,
) -> PostEnvelope:
    """Reject a pending post. A moderation note is required."""
    note = payload.moderation_note if payload else None
    post = moderation.reject(admin, post_id, note)
    return PostEnvelope(message="Post rejected successfully", post=PostResponse.model_validate(post))


@router.get("/users", response_model=UserListResponse)
async def list_users(
    admin: AdminDep,
    users: UserServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: str | None = Query(None, pattern="^(admin|registered)$"),
) -> UserListResponse:
    items, total = users.list_users(page=page, limit=limit, role=role)
    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in items],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.put("/users/{user_id}/role", response_model=UserEnvelope)
async def update_user_role(
    user_id: int,
    payload: RoleUpdateRequest,
    admin: AdminDep,
    users: UserServiceDep,
) -> UserEnvelope:
    user = users.update_role(admin, user_id, payload.role)
    return UserEnvelope(message="User role updated successfully", user=UserResponse.model_validate(user))


@router.put("/users/{user_id}/status", response_model=UserEnvelope)
async def update_user_status(
    user_id: int,
    payload: StatusUpdateRequest,
    admin: AdminDep,
    users: UserServiceDep,
) -> UserEnvelope:
    """Activate or deactivate an account; deactivation also revokes its refresh tokens."""
    user = users.set_active(admin, user_id, payload.is_active)
    verb = "activated" if user.is_active else "deactivated"
    return UserEnvelope(message=f"User {verb} successfully", user=UserResponse.model_validate(user))


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(admin: AdminDep, db: SessionDep) -> StatisticsResponse:
    stats = collect_statistics(db)
    return StatisticsResponse(
        statistics=Statistics(
            users=stats["users"],
            posts=stats["posts"],
            recent_posts=[PostResponse.model_validate(post) for post in stats["recent_posts"]],
        )
    )
