from __future__ import annotations

from pydantic import Field

from caseflow.models.base import DocumentModel, UtcDatetime
from caseflow.models.enums import VerificationStatus
from caseflow.models.user import UserSnapshot


class VerificationRequest(DocumentModel):
    """
    A doctor's credential-verification submission.

    State machine (see workflow.transitions.VERIFICATION):
      PENDING → APPROVED  (admin approves)
      PENDING → REJECTED  (admin rejects with reason)

    Both targets are terminal. A rejected doctor submits a new request; the
    old one is kept as audit trail.
    """

    user_id: str
    documents: list[str] = Field(default_factory=list)
    status: VerificationStatus = VerificationStatus.PENDING
    submitted_at: UtcDatetime
    reviewed_at: UtcDatetime | None = None
    reviewer_id: str | None = None
    rejection_reason: str | None = None


class VerificationRequestWithUser(VerificationRequest):
    # None when the requester's profile no longer exists
    user: UserSnapshot | None = None
