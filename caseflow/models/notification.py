from __future__ import annotations

from typing import Any

from caseflow.models.base import DocumentModel, UtcDatetime
from caseflow.models.enums import NotificationType


class Notification(DocumentModel):
    # Recipient user
    user_id: str
    type: NotificationType
    title: str
    message: str
    read: bool = False
    created_at: UtcDatetime
    # Arbitrary context payload for the client (request/report ids, etc.)
    data: dict[str, Any] | None = None
