"""
Moderation domain: user-facing routes.

Routes:
  POST /api/v1/reports   Flag a case, comment or profile for moderation
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from caseflow.dependencies import CurrentUser, get_current_user, get_moderation_workflow
from caseflow.moderation import controller as ctrl
from caseflow.moderation.schemas import CreateReportRequest
from caseflow.moderation.service import ModerationWorkflow
from caseflow.models.report import ReportedContent

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post(
    "",
    response_model=ReportedContent,
    status_code=status.HTTP_201_CREATED,
    summary="Report content",
)
async def create_report(
    body: CreateReportRequest,
    current_user: CurrentUser = Depends(get_current_user),
    workflow: ModerationWorkflow = Depends(get_moderation_workflow),
) -> ReportedContent:
    return await ctrl.create_report(workflow, current_user.id, body)
