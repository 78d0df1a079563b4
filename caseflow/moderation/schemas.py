from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from caseflow.models.enums import ContentType, ModerationAction
from caseflow.models.report import ReportedContent


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class CreateReportRequest(_Base):
    content_type: ContentType
    content_id: str = Field(min_length=1)
    reason: str = Field(max_length=1000, description="Why the content is being flagged.")


class ModerateRequest(_Base):
    action: ModerationAction = Field(
        description="reviewed: keep the content. removed: delete it and close the report.",
    )


class ReportQueueResponse(BaseModel):
    items: list[ReportedContent]
    total: int
