"""Notification Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from .common import Envelope, Pagination, UTCDateTime
from .user import UserSummary


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    related_post_id: int | None = None
    related_comment_id: int | None = None
    actor: UserSummary | None = None
    is_read: bool
    read_at: UTCDateTime | None = None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(Envelope):
    notifications: list[NotificationResponse]
    unread_count: int
    pagination: Pagination
