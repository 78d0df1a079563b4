from __future__ import annotations

from caseflow.exceptions import to_http_exception
from caseflow.moderation.schemas import CreateReportRequest, ModerateRequest, ReportQueueResponse
from caseflow.moderation.service import ModerationWorkflow
from caseflow.models.report import ReportedContent
from caseflow.workflow.errors import WorkflowError


async def create_report(
    workflow: ModerationWorkflow, reporter_id: str, body: CreateReportRequest
) -> ReportedContent:
    try:
        return await workflow.report(body.content_type, body.content_id, reporter_id, body.reason)
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc


async def get_queue(workflow: ModerationWorkflow) -> ReportQueueResponse:
    items = await workflow.list_pending()
    return ReportQueueResponse(items=items, total=len(items))


async def get_report(workflow: ModerationWorkflow, report_id: str) -> ReportedContent:
    try:
        return await workflow.get_by_id(report_id)
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc


async def moderate(
    workflow: ModerationWorkflow,
    report_id: str,
    moderator_id: str,
    body: ModerateRequest,
) -> ReportedContent:
    try:
        return await workflow.moderate(report_id, body.action, moderator_id)
    except WorkflowError as exc:
        raise to_http_exception(exc) from exc
