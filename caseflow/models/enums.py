import enum


# ── Verification request lifecycle ───────────────────────────────────────────
class VerificationStatus(str, enum.Enum):
    PENDING = "pending"      # Submitted, awaiting admin review
    APPROVED = "approved"    # Terminal
    REJECTED = "rejected"    # Terminal; the doctor may submit a new request


class VerificationAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"


# ── Profile-side mirror of the verification outcome ──────────────────────────
class DoctorVerificationStatus(str, enum.Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


# ── Reported content lifecycle ───────────────────────────────────────────────
class ContentType(str, enum.Enum):
    CASE = "case"
    COMMENT = "comment"
    PROFILE = "profile"


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"    # Terminal, content retained
    REMOVED = "removed"      # Terminal, content deleted


class ModerationAction(str, enum.Enum):
    REVIEWED = "reviewed"
    REMOVED = "removed"


class NotificationType(str, enum.Enum):
    VERIFICATION = "verification"
    MODERATION = "moderation"
    LIKE = "like"
    COMMENT = "comment"
    REPLY = "reply"
    SYSTEM = "system"
