"""Comment-related Pydantic schemas."""

from __future__ import annotations


from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import Envelope, Pagination, UTCDateTime
from .user import UserSummary


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=1000)
    post_id: int = Field(..., validation_alias=AliasChoices("post_id", "postId"))
    parent_comment_id: int | None = Field(
        None,
        validation_alias=AliasChoices("parent_comment_id", "parentCommentId"),
        description="Comment being replied to",
    )


class CommentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    id: int
    content: str
    post_id: int
    author: UserSummary | None = None
    parent_comment_id: int | None = None
    likes: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("liker_ids", "likes"),
        description="Ids of users who liked it",
    )
    likes_count: int = 0
    is_active: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class CommentThread(CommentResponse):
    """Top-level comment with its replies attached."""

    replies: list[CommentResponse] = Field(default_factory=list)


class CommentEnvelope(Envelope):
    message: str | None = None
    comment: CommentResponse


class CommentListResponse(Envelope):
    comments: list[CommentThread]
    pagination: Pagination
