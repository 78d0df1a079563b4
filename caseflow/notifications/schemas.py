from __future__ import annotations

from pydantic import BaseModel, Field

from caseflow.models.notification import Notification


class NotificationsResponse(BaseModel):
    """Notifications for the current user, newest first."""

    items: list[Notification]
    total: int = Field(description="Number of notifications returned.")
    unread: int = Field(description="Unread notifications for this user.")


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int
