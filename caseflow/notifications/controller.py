from __future__ import annotations

from caseflow.exceptions import to_http_exception
from caseflow.notifications.schemas import (
    MarkAllReadResponse,
    NotificationsResponse,
    UnreadCountResponse,
)
from caseflow.notifications.service import NotificationDispatcher
from caseflow.workflow.errors import NotFoundError, WorkflowError


async def get_notifications(
    dispatcher: NotificationDispatcher, user_id: str, only_unread: bool
) -> NotificationsResponse:
    items = await dispatcher.get_for_user(user_id, only_unread=only_unread).all()
    unread = await dispatcher.unread_count(user_id)
    return NotificationsResponse(items=items, total=len(items), unread=unread)


async def get_unread_count(dispatcher: NotificationDispatcher, user_id: str) -> UnreadCountResponse:
    return UnreadCountResponse(count=await dispatcher.unread_count(user_id))


async def mark_read(dispatcher: NotificationDispatcher, user_id: str, notification_id: str) -> None:
    try:
        notification = await dispatcher.get_by_id(notification_id)
        # Another user's notification is reported as missing.
        if notification.user_id != user_id:
            raise NotFoundError("Notification", notification_id)
        await dispatcher.mark_read(notification_id)
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc


async def mark_all_read(dispatcher: NotificationDispatcher, user_id: str) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await dispatcher.mark_all_read(user_id))
