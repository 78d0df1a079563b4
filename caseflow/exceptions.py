"""Translation of workflow errors into HTTP errors, shared by every controller.

The detail is a ``{"code", "message"}`` mapping so that clients can tell
"already handled, refresh" (invalid_state / conflict) apart from "fix your
input" (validation_error) without parsing messages.
"""
from fastapi import HTTPException, status

from caseflow.workflow.errors import (
    ConflictError,
    ContentDeletionError,
    InvalidStateError,
    NotFoundError,
    StoreTimeoutError,
    ValidationError,
    WorkflowError,
)

_STATUS_CODES: tuple[tuple[type[WorkflowError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (StoreTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (ContentDeletionError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: WorkflowError) -> HTTPException:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_CODES:
        if isinstance(exc, error_type):
            status_code = code
            break
    detail: dict[str, str] = {"code": exc.code, "message": str(exc)}
    if isinstance(exc, ValidationError):
        detail["field"] = exc.field
    return HTTPException(status_code=status_code, detail=detail)
