"""Post-related Pydantic schemas."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import Envelope, Pagination, UTCDateTime
from .user import UserSummary

MAX_IMAGES = 6


class PostCreate(BaseModel):
    """Schema for submitting a new post for moderation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=10, max_length=5000)
    category: str = Field("general", min_length=1, max_length=50)
    images: list[str] = Field(
        default_factory=list,
        max_length=MAX_IMAGES,
        description="Image references produced by the upload service",
    )


class PostUpdate(BaseModel):
    """Partial update of a pending post; omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=5, max_length=200)
    content: str | None = Field(None, min_length=10, max_length=5000)
    category: str | None = Field(None, min_length=1, max_length=50)
    images: list[str] | None = Field(None, max_length=MAX_IMAGES)


class ModerationRequest(BaseModel):
    """Body of approve/reject calls. Rejections require a note."""

    model_config = ConfigDict(str_strip_whitespace=True)

    moderation_note: str | None = Field(
        None,
        max_length=1000,
        validation_alias=AliasChoices("moderation_note", "moderationNote"),
    )


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    content: str
    category: str
    images: list[str]
    author: UserSummary | None = None
    status: str
    moderation_note: str | None = None
    moderated_by_id: int | None = None
    moderated_at: UTCDateTime | None = None
    likes: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("liker_ids", "likes"),
        description="Ids of users who liked it",
    )
    likes_count: int = 0
    comments_count: int
    views_count: int
    is_active: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class PostEnvelope(Envelope):
    message: str | None = None
    post: PostResponse


class PostListResponse(Envelope):
    posts: list[PostResponse]
    pagination: Pagination


class LikeResponse(Envelope):
    message: str
    action: Literal["liked", "unliked"]
    likes_count: int
