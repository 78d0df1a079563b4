from __future__ import annotations

from caseflow.models.base import DocumentModel, UtcDatetime
from caseflow.models.enums import ContentType, ReportStatus


class ReportedContent(DocumentModel):
    """
    A user report against a case, comment or profile.

    State machine (see workflow.transitions.MODERATION):
      PENDING → REVIEWED  (content retained)
      PENDING → REMOVED   (content deleted through its deletion hook)
    """

    content_type: ContentType
    # Soft reference into the collection that owns content_type
    content_id: str
    reported_by: str
    reason: str
    status: ReportStatus = ReportStatus.PENDING
    reported_at: UtcDatetime
    moderated_by: str | None = None
    moderated_at: UtcDatetime | None = None
