from __future__ import annotations

from pydantic import BaseModel

from caseflow.models.base import DocumentModel
from caseflow.models.enums import DoctorVerificationStatus


class UserProfile(DocumentModel):
    """The slice of a user profile the verification workflow reads and writes.

    Profiles are owned by the identity collaborator; this engine only writes
    ``doctor_verification_status`` and ``rejection_reason``.
    """

    display_name: str = ""
    email: str | None = None
    title: str | None = None
    specialization: str | None = None
    institution: str | None = None
    doctor_verification_status: DoctorVerificationStatus = DoctorVerificationStatus.UNVERIFIED
    rejection_reason: str | None = None


class UserSnapshot(BaseModel):
    """Denormalized copy of the requester shown alongside a verification request."""

    id: str
    display_name: str
    email: str | None = None
    title: str | None = None
    specialization: str | None = None
    institution: str | None = None
    doctor_verification_status: DoctorVerificationStatus

    @classmethod
    def of(cls, profile: UserProfile) -> UserSnapshot:
        return cls.model_validate(profile.model_dump(exclude={"rejection_reason"}))
