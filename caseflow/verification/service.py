"""
Verification domain: pure business logic (zero FastAPI imports).

State machine (workflow.transitions.VERIFICATION):
  PENDING → APPROVED   approve()
  PENDING → REJECTED   reject()

Synchronized write contract: the request write and the requester's profile
write go into one store batch. The request update carries the precondition
status == pending, so a concurrent transition makes the whole batch fail with
ConflictError, and a missing profile makes it fail with NotFoundError. Either
both documents change or neither does.

The batch runs shielded from cancellation: once the write has started it is
allowed to finish even if the caller gives up. The deadline covers the read
and the batch only. The notification is sent after the batch has committed
and outside the deadline, so a slow dispatcher cannot turn a committed
transition into a timeout.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from caseflow.constants import USERS, VERIFICATION_REQUESTS
from caseflow.models.base import utcnow
from caseflow.models.enums import (
    DoctorVerificationStatus,
    NotificationType,
    VerificationAction,
    VerificationStatus,
)
from caseflow.models.user import UserProfile, UserSnapshot
from caseflow.models.verification import VerificationRequest, VerificationRequestWithUser
from caseflow.notifications.service import NotificationDispatcher
from caseflow.store.base import DocumentNotFound, DocumentStore, PreconditionFailed
from caseflow.workflow.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from caseflow.workflow.runtime import run_uncancellable, run_with_deadline
from caseflow.workflow.transitions import VERIFICATION

logger = logging.getLogger(__name__)

_ENTITY = "verification request"


class VerificationWorkflow:
    def __init__(
        self,
        store: DocumentStore,
        notifications: NotificationDispatcher,
        *,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._timeout = timeout

    # ── Reads ────────────────────────────────────────────────────────────────

    async def _load(self, request_id: str) -> VerificationRequest:
        doc = await self._store.get(VERIFICATION_REQUESTS, request_id)
        if doc is None:
            raise NotFoundError("Verification request", request_id)
        return VerificationRequest.from_document(doc)

    async def _load_profile(self, user_id: str) -> UserProfile | None:
        doc = await self._store.get(USERS, user_id)
        return UserProfile.from_document(doc) if doc is not None else None

    async def _with_user(self, request: VerificationRequest) -> VerificationRequestWithUser:
        profile = await self._load_profile(request.user_id)
        return VerificationRequestWithUser(
            **request.model_dump(),
            user=UserSnapshot.of(profile) if profile is not None else None,
        )

    async def _enrich_all(
        self, requests: Sequence[VerificationRequest]
    ) -> list[VerificationRequestWithUser]:
        return list(await asyncio.gather(*(self._with_user(r) for r in requests)))

    async def get_by_id(self, request_id: str) -> VerificationRequestWithUser:
        return await self._with_user(await self._load(request_id))

    async def list_pending(self) -> list[VerificationRequestWithUser]:
        """Pending requests, oldest first (FIFO review queue)."""
        docs = await self._store.query(
            VERIFICATION_REQUESTS,
            where={"status": VerificationStatus.PENDING},
            order_by="submitted_at",
        )
        return await self._enrich_all([VerificationRequest.from_document(d) for d in docs])

    async def list_all(self) -> list[VerificationRequestWithUser]:
        """Every request regardless of status, newest first."""
        docs = await self._store.query(
            VERIFICATION_REQUESTS, order_by="submitted_at", descending=True
        )
        return await self._enrich_all([VerificationRequest.from_document(d) for d in docs])

    # ── Submission ───────────────────────────────────────────────────────────

    async def submit(self, user_id: str, documents: Sequence[str]) -> VerificationRequest:
        """Create a PENDING request and advance the profile to PENDING.

        Blocked while the profile is VERIFIED or already has a pending request.
        A REJECTED doctor may submit again; the rejected request stays as is.
        """
        documents = [d.strip() for d in documents if d and d.strip()]
        if not documents:
            raise ValidationError("documents", "At least one document is required.")
        profile = await self._load_profile(user_id)
        if profile is None:
            raise NotFoundError("User profile", user_id)
        if profile.doctor_verification_status in (
            DoctorVerificationStatus.VERIFIED,
            DoctorVerificationStatus.PENDING,
        ):
            raise InvalidStateError(
                "user profile", user_id, profile.doctor_verification_status.value, "submit"
            )
        open_requests = await self._store.query(
            VERIFICATION_REQUESTS,
            where={"user_id": user_id, "status": VerificationStatus.PENDING},
            limit=1,
        )
        if open_requests:
            raise InvalidStateError("user profile", user_id, "pending", "submit")

        batch = self._store.batch()
        batch.create(
            VERIFICATION_REQUESTS,
            {
                "user_id": user_id,
                "documents": documents,
                "status": VerificationStatus.PENDING,
                "submitted_at": utcnow(),
                "reviewed_at": None,
                "reviewer_id": None,
                "rejection_reason": None,
            },
        )
        batch.update(
            USERS,
            user_id,
            {"doctor_verification_status": DoctorVerificationStatus.PENDING},
            expect={"doctor_verification_status": profile.doctor_verification_status},
        )
        try:
            request_doc, _ = await batch.commit()
        except PreconditionFailed as exc:
            raise ConflictError("user profile", user_id) from exc
        except DocumentNotFound as exc:
            raise NotFoundError("User profile", user_id) from exc
        logger.info("Verification request %s submitted by %s", request_doc.id, user_id)
        return VerificationRequest.from_document(request_doc)

    # ── Transitions ──────────────────────────────────────────────────────────

    async def approve(
        self,
        request_id: str,
        reviewer_id: str,
        *,
        timeout: float | None = None,
    ) -> VerificationRequest:
        """PENDING → APPROVED; profile → VERIFIED with the rejection reason cleared."""
        updated = await run_with_deadline(
            self._review(request_id, reviewer_id, VerificationAction.APPROVE, None),
            timeout if timeout is not None else self._timeout,
            "approve",
        )
        await self._notify(updated)
        return updated

    async def reject(
        self,
        request_id: str,
        reviewer_id: str,
        reason: str,
        *,
        timeout: float | None = None,
    ) -> VerificationRequest:
        """PENDING → REJECTED; profile → REJECTED carrying the reason."""
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("reason", "A rejection reason is required.")
        updated = await run_with_deadline(
            self._review(request_id, reviewer_id, VerificationAction.REJECT, reason),
            timeout if timeout is not None else self._timeout,
            "reject",
        )
        await self._notify(updated)
        return updated

    async def _review(
        self,
        request_id: str,
        reviewer_id: str,
        action: VerificationAction,
        reason: str | None,
    ) -> VerificationRequest:
        request = await self._load(request_id)
        target = VERIFICATION.next_state(request.status, action, entity_id=request_id)
        profile_status = (
            DoctorVerificationStatus.VERIFIED
            if target == VerificationStatus.APPROVED
            else DoctorVerificationStatus.REJECTED
        )
        request_changes = {
            "status": target,
            "reviewer_id": reviewer_id,
            "reviewed_at": utcnow(),
            "rejection_reason": reason,
        }
        profile_changes = {
            "doctor_verification_status": profile_status,
            "rejection_reason": reason,
        }
        return await run_uncancellable(
            self._commit_review(request, request_changes, profile_changes)
        )

    async def _commit_review(
        self,
        request: VerificationRequest,
        request_changes: dict[str, Any],
        profile_changes: dict[str, Any],
    ) -> VerificationRequest:
        batch = self._store.batch()
        batch.update(
            VERIFICATION_REQUESTS,
            request.id,
            request_changes,
            expect={"status": VerificationStatus.PENDING},
        )
        batch.update(USERS, request.user_id, profile_changes)
        try:
            request_doc, _ = await batch.commit()
        except PreconditionFailed as exc:
            logger.warning("Verification request %s changed under review", request.id)
            raise ConflictError(_ENTITY, request.id) from exc
        except DocumentNotFound as exc:
            if exc.collection == USERS:
                raise NotFoundError("User profile", request.user_id) from exc
            raise NotFoundError("Verification request", request.id) from exc

        updated = VerificationRequest.from_document(request_doc)
        logger.info(
            "Verification request %s %s by %s",
            updated.id,
            updated.status.value,
            updated.reviewer_id,
        )
        return updated

    async def _notify(self, request: VerificationRequest) -> None:
        if request.status == VerificationStatus.APPROVED:
            title = "Verification approved"
            message = (
                "Your doctor verification has been approved. "
                "You can now access all doctor features."
            )
        else:
            title = "Verification rejected"
            message = (
                f"Your doctor verification was rejected. Reason: {request.rejection_reason}"
            )
        await self._notifications.dispatch(
            request.user_id,
            NotificationType.VERIFICATION,
            title,
            message,
            {"request_id": request.id, "status": request.status.value},
        )
