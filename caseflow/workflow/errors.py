# Domain exceptions raised by the workflow services.
# The controller layer catches these and converts them to HTTPException.
from __future__ import annotations


class WorkflowError(Exception):
    code = "workflow_error"


class NotFoundError(WorkflowError):
    code = "not_found"

    def __init__(self, resource: str, resource_id: str) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class InvalidStateError(WorkflowError):
    """Transition attempted from a state that has no such outgoing edge."""

    code = "invalid_state"

    def __init__(self, entity: str, entity_id: str, status: str, action: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} {entity} {entity_id}: status is '{status}'")


class ConflictError(WorkflowError):
    """The entity changed between our read and our precondition-checked write."""

    code = "conflict"

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} was modified concurrently. Re-fetch it before retrying."
        )


class ValidationError(WorkflowError):
    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class StoreTimeoutError(WorkflowError, TimeoutError):
    """The store did not answer within the deadline; commit status is unknown."""

    code = "timeout"

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"{operation} did not complete within {timeout:g}s. The change may or may not "
            "have been committed; re-fetch current state before retrying."
        )


class ContentDeletionError(WorkflowError):
    """The content-deletion hook failed; the report was returned to pending."""

    code = "content_deletion_failed"

    def __init__(self, content_type: str, content_id: str) -> None:
        self.content_type = content_type
        self.content_id = content_id
        super().__init__(f"Could not delete {content_type} {content_id}")


class DependencyError(WorkflowError):
    """A best-effort side effect failed. Reported, never raised to callers."""

    code = "dependency_error"

    def __init__(self, dependency: str, message: str) -> None:
        self.dependency = dependency
        self.message = message
        super().__init__(f"{dependency}: {message}")
