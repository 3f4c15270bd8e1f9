"""
Notifications API Endpoints.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import ApiResponse, AckResponse
from modules.backend.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from modules.backend.services.notification import NotificationService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[NotificationResponse]],
    summary="Your notifications, newest first",
)
async def list_notifications(
    user: CurrentUser,
    db: DbSession,
    limit: int = Query(default=50, ge=1, le=200),
) -> ApiResponse[list[NotificationResponse]]:
    notifications = await NotificationService(db).list_notifications(user.id, limit=limit)
    return ApiResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications]
    )


@router.get(
    "/unread-count",
    response_model=ApiResponse[UnreadCountResponse],
    summary="Number of unread notifications",
)
async def unread_count(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[UnreadCountResponse]:
    count = await NotificationService(db).unread_count(user.id)
    return ApiResponse(data=UnreadCountResponse(count=count))


@router.patch(
    "/mark-all-read",
    response_model=ApiResponse[MarkAllReadResponse],
    summary="Mark every notification as read",
)
async def mark_all_read(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[MarkAllReadResponse]:
    updated = await NotificationService(db).mark_all_read(user.id)
    return ApiResponse(data=MarkAllReadResponse(updated=updated))


@router.patch(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationResponse],
    summary="Mark a notification as read",
)
async def mark_read(
    notification_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NotificationResponse]:
    notification = await NotificationService(db).mark_read(user.id, notification_id)
    return ApiResponse(data=NotificationResponse.model_validate(notification))


@router.delete(
    "/{notification_id}",
    response_model=ApiResponse[AckResponse],
    summary="Delete a notification",
)
async def delete_notification(
    notification_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[AckResponse]:
    await NotificationService(db).delete_notification(user.id, notification_id)
    return ApiResponse(data=AckResponse(message="Notification deleted"))
