from caseflow.models.enums import (
    ContentType,
    DoctorVerificationStatus,
    ModerationAction,
    NotificationType,
    ReportStatus,
    VerificationAction,
    VerificationStatus,
)
from caseflow.models.notification import Notification
from caseflow.models.report import ReportedContent
from caseflow.models.user import UserProfile, UserSnapshot
from caseflow.models.verification import VerificationRequest, VerificationRequestWithUser

__all__ = [
    "ContentType",
    "DoctorVerificationStatus",
    "ModerationAction",
    "Notification",
    "NotificationType",
    "ReportStatus",
    "ReportedContent",
    "UserProfile",
    "UserSnapshot",
    "VerificationAction",
    "VerificationRequest",
    "VerificationRequestWithUser",
    "VerificationStatus",
]
