"""
Notification dispatcher: persists and reads per-user notifications.

Workflows call dispatch() at the tail of a successful transition. Dispatch is
best-effort: it never raises; failures become DependencyError and go to the
error reporter, and the transition that triggered it still succeeds.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

from caseflow.constants import NOTIFICATIONS
from caseflow.models.base import utcnow
from caseflow.models.enums import NotificationType
from caseflow.models.notification import Notification
from caseflow.store.base import DocumentNotFound, DocumentStore
from caseflow.workflow.errors import DependencyError, NotFoundError
from caseflow.workflow.runtime import ErrorReporter, log_dependency_error

logger = logging.getLogger(__name__)


class NotificationFeed:
    """Newest-first notifications for one user.

    Iterating runs a fresh query every time, so a feed object can be iterated
    again later to see notifications created since.
    """

    def __init__(self, store: DocumentStore, user_id: str, *, only_unread: bool = False) -> None:
        self._store = store
        self.user_id = user_id
        self.only_unread = only_unread

    def __aiter__(self) -> AsyncIterator[Notification]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Notification]:
        where: dict[str, Any] = {"user_id": self.user_id}
        if self.only_unread:
            where["read"] = False
        docs = await self._store.query(
            NOTIFICATIONS, where=where, order_by="created_at", descending=True
        )
        for doc in docs:
            yield Notification.from_document(doc)

    async def all(self) -> list[Notification]:
        return [n async for n in self]


class NotificationDispatcher:
    def __init__(
        self,
        store: DocumentStore,
        *,
        error_reporter: ErrorReporter = log_dependency_error,
    ) -> None:
        self._store = store
        self._error_reporter = error_reporter

    async def create(
        self,
        user_id: str,
        type_: NotificationType,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        notification_data = {
            "user_id": user_id,
            "type": type_,
            "title": title,
            "message": message,
            "read": False,
            "created_at": utcnow(),
            "data": data,
        }
        doc = await self._store.create(NOTIFICATIONS, notification_data)
        return Notification.from_document(doc)

    def get_for_user(self, user_id: str, *, only_unread: bool = False) -> NotificationFeed:
        return NotificationFeed(self._store, user_id, only_unread=only_unread)

    async def get_by_id(self, notification_id: str) -> Notification:
        doc = await self._store.get(NOTIFICATIONS, notification_id)
        if doc is None:
            raise NotFoundError("Notification", notification_id)
        return Notification.from_document(doc)

    async def mark_read(self, notification_id: str) -> Notification:
        """Set read=True. Already-read notifications are returned untouched."""
        notification = await self.get_by_id(notification_id)
        if notification.read:
            return notification
        try:
            doc = await self._store.update(NOTIFICATIONS, notification_id, {"read": True})
        except DocumentNotFound:
            raise NotFoundError("Notification", notification_id) from None
        return Notification.from_document(doc)

    async def mark_all_read(self, user_id: str) -> int:
        unread = await self._store.query(
            NOTIFICATIONS, where={"user_id": user_id, "read": False}
        )
        if not unread:
            return 0
        batch = self._store.batch()
        for doc in unread:
            batch.update(NOTIFICATIONS, doc.id, {"read": True})
        await batch.commit()
        return len(unread)

    async def unread_count(self, user_id: str) -> int:
        unread = await self._store.query(
            NOTIFICATIONS, where={"user_id": user_id, "read": False}
        )
        return len(unread)

    async def dispatch(
        self,
        user_id: str,
        type_: NotificationType,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> Notification | None:
        """create() for workflow side effects: never raises, returns None on failure."""
        try:
            notification = await self.create(user_id, type_, title, message, data)
        except Exception as exc:
            error = DependencyError("notifications", f"could not notify user {user_id}: {exc}")
            error.__cause__ = exc
            self.report_failure(error)
            return None
        logger.info("Notified user %s (%s)", user_id, type_.value)
        return notification

    def report_failure(self, error: DependencyError) -> None:
        try:
            self._error_reporter(error)
        except Exception:
            logger.exception("Error reporter failed while handling %s", error)
