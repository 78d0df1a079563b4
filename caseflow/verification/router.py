"""
Verification domain: user-facing routes.

Routes:
  POST /api/v1/verification   Submit credential documents for review
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from caseflow.dependencies import CurrentUser, get_current_user, get_verification_workflow
from caseflow.models.verification import VerificationRequest
from caseflow.verification import controller as ctrl
from caseflow.verification.schemas import SubmitRequest
from caseflow.verification.service import VerificationWorkflow

router = APIRouter(prefix="/verification", tags=["verification"])


@router.post(
    "",
    response_model=VerificationRequest,
    status_code=status.HTTP_201_CREATED,
    summary="Submit documents for doctor verification",
)
async def submit_verification(
    body: SubmitRequest,
    current_user: CurrentUser = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
) -> VerificationRequest:
    return await ctrl.submit(workflow, current_user.id, body)
