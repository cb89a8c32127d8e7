"""Comment endpoints for the Farmer Social API."""

from fastapi import APIRouter, Query, status

from farmer_social.api.v1.dependencies import CommentServiceDep, CurrentUserDep
from farmer_social.schemas.comment import (
    CommentCreate,
    CommentEnvelope,
    CommentListResponse,
    CommentResponse,
    CommentThread,
    CommentUpdate,
)
from farmer_social.schemas.common import MessageResponse, Pagination
from farmer_social.schemas.post import LikeResponse

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/post/{post_id}", response_model=CommentListResponse)
async def list_post_comments(
    post_id: int,
    comments: CommentServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> CommentListResponse:
    """Top-level comments, oldest first, each with its replies."""
    threads, total = comments.list_for_post(post_id, page=page, limit=limit)
    return CommentListResponse(
        comments=[
            CommentThread.model_validate(comment).model_copy(
                update={"replies": [CommentResponse.model_validate(reply) for reply in replies]}
            )
            for comment, replies in threads
        ],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CommentEnvelope)
async def create_comment(
    payload: CommentCreate,
    identity: CurrentUserDep,
    comments: CommentServiceDep,
) -> CommentEnvelope:
    comment = comments.add_comment(identity, payload)
    return CommentEnvelope(
        message="Comment added successfully",
        comment=CommentResponse.model_validate(comment),
    )


@router.put("/{comment_id}", response_model=CommentEnvelope)
async def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    identity: CurrentUserDep,
    comments: CommentServiceDep,
) -> CommentEnvelope:
    comment = comments.update_comment(identity, comment_id, payload.content)
    return CommentEnvelope(
        message="Comment updated successfully",
        comment=CommentResponse.model_validate(comment),
    )


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    identity: CurrentUserDep,
    comments: CommentServiceDep,
) -> MessageResponse:
    comments.delete_comment(identity, comment_id)
    return MessageResponse(message="Comment deleted successfully")


@router.post("/{comment_id}/like", response_model=LikeResponse)
async def like_comment(
    comment_id: int,
    identity: CurrentUserDep,
    comments: CommentServiceDep,
) -> LikeResponse:
    result = comments.toggle_like(comment_id, identity)
    return LikeResponse(
        message=f"Comment {result.action} successfully",
        action=result.action,
        likes_count=result.likes_count,
    )
