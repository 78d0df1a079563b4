"""
Verification domain: request orchestration.

Calls the workflow and converts workflow errors into HTTP errors.
"""
from __future__ import annotations

from caseflow.exceptions import to_http_exception
from caseflow.models.verification import VerificationRequest, VerificationRequestWithUser
from caseflow.verification.schemas import ReviewRequest, SubmitRequest, VerificationQueueResponse
from caseflow.verification.service import VerificationWorkflow
from caseflow.workflow.errors import WorkflowError


async def submit(
    workflow: VerificationWorkflow, user_id: str, body: SubmitRequest
) -> VerificationRequest:
    try:
        return await workflow.submit(user_id, body.documents)
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc


async def get_queue(workflow: VerificationWorkflow) -> VerificationQueueResponse:
    items = await workflow.list_pending()
    return VerificationQueueResponse(items=items, total=len(items))


async def list_requests(workflow: VerificationWorkflow) -> VerificationQueueResponse:
    items = await workflow.list_all()
    return VerificationQueueResponse(items=items, total=len(items))


async def get_request(
    workflow: VerificationWorkflow, request_id: str
) -> VerificationRequestWithUser:
    try:
        return await workflow.get_by_id(request_id)
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc


async def review(
    workflow: VerificationWorkflow,
    request_id: str,
    reviewer_id: str,
    body: ReviewRequest,
) -> VerificationRequest:
    try:
        if body.action == "APPROVE":
            return await workflow.approve(request_id, reviewer_id)
        return await workflow.reject(request_id, reviewer_id, body.reason or "")
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc
