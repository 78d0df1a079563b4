"""
Moderation domain: admin-facing routes.

Routes:
  GET   /api/v1/admin/moderation/queue         Pending reports, oldest first
  GET   /api/v1/admin/moderation/{report_id}   One report
  PATCH /api/v1/admin/moderation/{report_id}   Mark reviewed or remove the content

Requires: ADMIN or SUPER_ADMIN role.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from caseflow.dependencies import CurrentUser, get_moderation_workflow, require_admin
from caseflow.moderation import controller as ctrl
from caseflow.moderation.schemas import ModerateRequest, ReportQueueResponse
from caseflow.moderation.service import ModerationWorkflow
from caseflow.models.report import ReportedContent

router = APIRouter(prefix="/admin/moderation", tags=["admin-moderation"])


@router.get(
    "/queue",
    response_model=ReportQueueResponse,
    summary="[Admin] List PENDING content reports (FIFO order)",
)
async def get_queue(
    admin: CurrentUser = Depends(require_admin),
    workflow: ModerationWorkflow = Depends(get_moderation_workflow),
) -> ReportQueueResponse:
    return await ctrl.get_queue(workflow)


@router.get(
    "/{report_id}",
    response_model=ReportedContent,
    summary="[Admin] Get one content report",
)
async def get_report(
    report_id: str,
    admin: CurrentUser = Depends(require_admin),
    workflow: ModerationWorkflow = Depends(get_moderation_workflow),
) -> ReportedContent:
    return await ctrl.get_report(workflow, report_id)


@router.patch(
    "/{report_id}",
    response_model=ReportedContent,
    summary="[Admin] Resolve a content report",
    description=(
        "action=reviewed: the content stays. "
        "action=removed: the reported content is deleted; if deletion fails the "
        "report returns to PENDING and the call fails with 502."
    ),
)
async def moderate_report(
    report_id: str,
    body: ModerateRequest,
    admin: CurrentUser = Depends(require_admin),
    workflow: ModerationWorkflow = Depends(get_moderation_workflow),
) -> ReportedContent:
    return await ctrl.moderate(workflow, report_id, admin.id, body)
