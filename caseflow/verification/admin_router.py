"""
Verification domain: admin-facing routes.

Routes:
  GET   /api/v1/admin/verification/queue                 Pending requests, oldest first
  GET   /api/v1/admin/verification/requests              All requests, newest first
  GET   /api/v1/admin/verification/{request_id}          One request with requester snapshot
  PATCH /api/v1/admin/verification/{request_id}/review   Approve or reject

Requires: ADMIN or SUPER_ADMIN role.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from caseflow.dependencies import CurrentUser, get_verification_workflow, require_admin
from caseflow.models.verification import VerificationRequestWithUser
from caseflow.verification import controller as ctrl
from caseflow.verification.schemas import ReviewRequest, ReviewResponse, VerificationQueueResponse
from caseflow.verification.service import VerificationWorkflow

router = APIRouter(prefix="/admin/verification", tags=["admin-verification"])


@router.get(
    "/queue",
    response_model=VerificationQueueResponse,
    summary="[Admin] List PENDING verification requests (FIFO order)",
)
async def get_queue(
    admin: CurrentUser = Depends(require_admin),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
) -> VerificationQueueResponse:
    return await ctrl.get_queue(workflow)


@router.get(
    "/requests",
    response_model=VerificationQueueResponse,
    summary="[Admin] List all verification requests, newest first",
)
async def list_requests(
    admin: CurrentUser = Depends(require_admin),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
) -> VerificationQueueResponse:
    return await ctrl.list_requests(workflow)


@router.get(
    "/{request_id}",
    response_model=VerificationRequestWithUser,
    summary="[Admin] Get one verification request",
)
async def get_request(
    request_id: str,
    admin: CurrentUser = Depends(require_admin),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
) -> VerificationRequestWithUser:
    return await ctrl.get_request(workflow, request_id)


@router.patch(
    "/{request_id}/review",
    response_model=ReviewResponse,
    summary="[Admin] Approve or reject a verification request",
    description=(
        "action=APPROVE: request APPROVED, user VERIFIED. "
        "action=REJECT: request REJECTED, user REJECTED with the given reason. "
        "Reviewing a request that is no longer PENDING returns 409."
    ),
)
async def review_request(
    request_id: str,
    body: ReviewRequest,
    admin: CurrentUser = Depends(require_admin),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
) -> ReviewResponse:
    return await ctrl.review(workflow, request_id, admin.id, body)
