"""
Moderation domain: pure business logic (zero FastAPI imports).

State machine (workflow.transitions.MODERATION):
  PENDING → REVIEWED   moderate(action=reviewed)  content retained
  PENDING → REMOVED    moderate(action=removed)   content deleted

Removal is a two-phase write:
  1. the report moves to REMOVED under the precondition status == pending;
  2. the deletion hook for the content type runs exactly once.
If phase 2 fails, a compensating write puts the report back to PENDING and
the caller gets ContentDeletionError, so the report never claims a removal
that did not happen. Both phases run shielded from cancellation and under the
caller's deadline. The notification is sent afterwards, outside the deadline.

The notification goes to the content's author, never to the reporter.
"""
from __future__ import annotations

import logging

from caseflow.constants import AUTHOR_FIELDS, CONTENT_COLLECTIONS, REPORTED_CONTENT
from caseflow.models.base import utcnow
from caseflow.models.enums import (
    ContentType,
    ModerationAction,
    NotificationType,
    ReportStatus,
)
from caseflow.models.report import ReportedContent
from caseflow.moderation.hooks import DeletionHook, DeletionHooks, default_deletion_hooks
from caseflow.notifications.service import NotificationDispatcher
from caseflow.store.base import DocumentNotFound, DocumentStore, PreconditionFailed, StoreError
from caseflow.workflow.errors import (
    ConflictError,
    ContentDeletionError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from caseflow.workflow.runtime import run_uncancellable, run_with_deadline
from caseflow.workflow.transitions import MODERATION

logger = logging.getLogger(__name__)


class ModerationWorkflow:
    def __init__(
        self,
        store: DocumentStore,
        notifications: NotificationDispatcher,
        *,
        deletion_hooks: DeletionHooks | None = None,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._hooks = dict(deletion_hooks) if deletion_hooks is not None else default_deletion_hooks(store)
        self._timeout = timeout

    async def get_by_id(self, report_id: str) -> ReportedContent:
        doc = await self._store.get(REPORTED_CONTENT, report_id)
        if doc is None:
            raise NotFoundError("Report", report_id)
        return ReportedContent.from_document(doc)

    async def list_pending(self) -> list[ReportedContent]:
        """Pending reports, oldest first."""
        docs = await self._store.query(
            REPORTED_CONTENT,
            where={"status": ReportStatus.PENDING},
            order_by="reported_at",
        )
        return [ReportedContent.from_document(d) for d in docs]

    async def report(
        self,
        content_type: ContentType | str,
        content_id: str,
        reported_by: str,
        reason: str,
    ) -> ReportedContent:
        """Flag a piece of content for review."""
        try:
            content_type = ContentType(content_type)
        except ValueError:
            raise ValidationError("content_type", f"Unknown content type '{content_type}'.") from None
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("reason", "A reason is required when reporting content.")
        doc = await self._store.create(
            REPORTED_CONTENT,
            {
                "content_type": content_type,
                "content_id": content_id,
                "reported_by": reported_by,
                "reason": reason,
                "status": ReportStatus.PENDING,
                "reported_at": utcnow(),
                "moderated_by": None,
                "moderated_at": None,
            },
        )
        logger.info("%s %s reported by %s", content_type.value, content_id, reported_by)
        return ReportedContent.from_document(doc)

    async def moderate(
        self,
        report_id: str,
        action: ModerationAction | str,
        moderator_id: str,
        *,
        timeout: float | None = None,
    ) -> ReportedContent:
        try:
            action = ModerationAction(action)
        except ValueError:
            raise ValidationError(
                "action", f"Unknown moderation action '{action}'; use 'reviewed' or 'removed'."
            ) from None
        updated, author_id = await run_with_deadline(
            self._moderate(report_id, action, moderator_id),
            timeout if timeout is not None else self._timeout,
            "moderate",
        )
        await self._notify(updated, author_id)
        return updated

    async def _moderate(
        self, report_id: str, action: ModerationAction, moderator_id: str
    ) -> tuple[ReportedContent, str | None]:
        report = await self.get_by_id(report_id)
        target = MODERATION.next_state(report.status, action, entity_id=report_id)
        hook: DeletionHook | None = None
        if target == ReportStatus.REMOVED:
            hook = self._hooks.get(report.content_type)
            if hook is None:
                raise ValidationError(
                    "content_type",
                    f"No deletion hook registered for '{report.content_type.value}'.",
                )
        # The author must be read before the content is gone.
        author_id = await self._resolve_author(report)
        updated = await run_uncancellable(self._apply(report, target, moderator_id, hook))
        return updated, author_id

    async def _apply(
        self,
        report: ReportedContent,
        target: ReportStatus,
        moderator_id: str,
        hook: DeletionHook | None,
    ) -> ReportedContent:
        try:
            doc = await self._store.update(
                REPORTED_CONTENT,
                report.id,
                {"status": target, "moderated_by": moderator_id, "moderated_at": utcnow()},
                expect={"status": ReportStatus.PENDING},
            )
        except PreconditionFailed as exc:
            logger.warning("Report %s changed under moderation", report.id)
            raise ConflictError("report", report.id) from exc
        except DocumentNotFound as exc:
            raise NotFoundError("Report", report.id) from exc

        if hook is not None:
            try:
                await hook(report.content_id)
            except Exception as exc:
                logger.error(
                    "Deleting %s %s failed; reopening report %s",
                    report.content_type.value,
                    report.content_id,
                    report.id,
                )
                await self._reopen(report, moderator_id)
                raise ContentDeletionError(report.content_type.value, report.content_id) from exc

        updated = ReportedContent.from_document(doc)
        logger.info("Report %s %s by %s", updated.id, updated.status.value, moderator_id)
        return updated

    async def _reopen(self, report: ReportedContent, moderator_id: str) -> None:
        """Compensate a failed removal: REMOVED → PENDING, only if still ours."""
        try:
            await self._store.update(
                REPORTED_CONTENT,
                report.id,
                {"status": ReportStatus.PENDING, "moderated_by": None, "moderated_at": None},
                expect={"status": ReportStatus.REMOVED, "moderated_by": moderator_id},
            )
        except StoreError:
            logger.exception("Could not reopen report %s after failed removal", report.id)

    async def _resolve_author(self, report: ReportedContent) -> str | None:
        if report.content_type == ContentType.PROFILE:
            return report.content_id
        doc = await self._store.get(CONTENT_COLLECTIONS[report.content_type], report.content_id)
        if doc is None:
            return None
        for field in AUTHOR_FIELDS:
            if doc.data.get(field):
                return str(doc.data[field])
        return None

    async def _notify(self, report: ReportedContent, author_id: str | None) -> None:
        label = report.content_type.value
        if author_id is None:
            self._notifications.report_failure(
                DependencyError(
                    "notifications",
                    f"no author found for {label} {report.content_id}; report {report.id} "
                    "was moderated without notifying anyone",
                )
            )
            return
        if report.status == ReportStatus.REMOVED:
            title = "Content removed"
            message = (
                f"Your {label} was removed by a moderator after being reported. "
                f"Reason given: {report.reason}"
            )
        else:
            title = "Report reviewed"
            message = (
                f"A report about your {label} was reviewed. "
                "No action was taken and your content remains available."
            )
        await self._notifications.dispatch(
            author_id,
            NotificationType.MODERATION,
            title,
            message,
            {
                "report_id": report.id,
                "content_type": label,
                "content_id": report.content_id,
                "action": report.status.value,
            },
        )
