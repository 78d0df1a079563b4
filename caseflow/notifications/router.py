from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from caseflow.dependencies import CurrentUser, get_current_user, get_notifications
from caseflow.notifications import controller
from caseflow.notifications.schemas import (
    MarkAllReadResponse,
    NotificationsResponse,
    UnreadCountResponse,
)
from caseflow.notifications.service import NotificationDispatcher

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=NotificationsResponse,
    summary="List my notifications",
    description="Returns notifications for the authenticated user, newest first.",
)
async def list_notifications(
    only_unread: bool = Query(
        default=False,
        description="When true, return only unread notifications.",
    ),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notifications),
) -> NotificationsResponse:
    return await controller.get_notifications(dispatcher, current_user.id, only_unread)


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Count my unread notifications",
)
async def unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notifications),
) -> UnreadCountResponse:
    return await controller.get_unread_count(dispatcher, current_user.id)


@router.post(
    "/mark-all-read",
    response_model=MarkAllReadResponse,
    summary="Mark all my notifications as read",
)
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notifications),
) -> MarkAllReadResponse:
    return await controller.mark_all_read(dispatcher, current_user.id)


@router.post(
    "/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a single notification as read",
)
async def mark_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notifications),
) -> None:
    await controller.mark_read(dispatcher, current_user.id, notification_id)
