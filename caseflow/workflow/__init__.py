from caseflow.workflow.errors import (
    ConflictError,
    ContentDeletionError,
    DependencyError,
    InvalidStateError,
    NotFoundError,
    StoreTimeoutError,
    ValidationError,
    WorkflowError,
)

__all__ = [
    "ConflictError",
    "ContentDeletionError",
    "DependencyError",
    "InvalidStateError",
    "NotFoundError",
    "StoreTimeoutError",
    "ValidationError",
    "WorkflowError",
]
