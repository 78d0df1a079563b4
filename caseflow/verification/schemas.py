"""
Verification domain: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from caseflow.models.verification import VerificationRequest, VerificationRequestWithUser


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── User-facing ───────────────────────────────────────────────────────────────

class SubmitRequest(_Base):
    """Submit credential documents for admin review."""

    documents: list[str] = Field(
        description="Storage references of the uploaded credential documents.",
    )


# ── Admin-facing ──────────────────────────────────────────────────────────────

class VerificationQueueResponse(BaseModel):
    items: list[VerificationRequestWithUser]
    total: int


class ReviewRequest(_Base):
    action: Literal["APPROVE", "REJECT"]
    # Emptiness is checked by the workflow so the caller gets a validation_error
    # envelope naming the field.
    reason: str | None = Field(
        None,
        max_length=1000,
        description="Required when action=REJECT (rejection reason shown to the user). Ignored when action=APPROVE.",
    )


ReviewResponse = VerificationRequest
