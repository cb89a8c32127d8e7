"""Notification inbox endpoints for the Farmer Social API."""

from fastapi import APIRouter, Query

from farmer_social.api.v1.dependencies import CurrentUserDep, NotificationServiceDep
from farmer_social.schemas.common import MessageResponse, Pagination
from farmer_social.schemas.notification import NotificationListResponse, NotificationResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    identity: CurrentUserDep,
    notifications: NotificationServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False, alias="unreadOnly"),
) -> NotificationListResponse:
    """The caller's notifications, newest first, with the unread count."""
    items, total, unread_count = notifications.list_for(
        identity.id, page=page, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(item) for item in items],
        unread_count=unread_count,
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_read(
    identity: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> MessageResponse:
    updated = notifications.mark_all_as_read(identity.id)
    return MessageResponse(message=f"{updated} notifications marked as read")


@router.put("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: int,
    identity: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> MessageResponse:
    notifications.mark_as_read(identity.id, notification_id)
    return MessageResponse(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: int,
    identity: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> MessageResponse:
    notifications.delete(identity.id, notification_id)
    return MessageResponse(message="Notification deleted")
