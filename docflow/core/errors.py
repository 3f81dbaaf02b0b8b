"""Error taxonomy for the document workflow.

Domain-rule violations are caller errors and are never retried.
Each error carries a stable ``code`` and the HTTP status it maps to.
"""

from typing import Optional


class WorkflowError(Exception):
    """Base class for all workflow errors."""

    code = "internal"
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(WorkflowError):
    """Raised when a document, user or contract id does not resolve."""

    code = "not_found"
    status_code = 404
    default_message = "Not found"


class ForbiddenError(WorkflowError):
    """Raised when the caller's role does not match the action's required role."""

    code = "forbidden"
    status_code = 403
    default_message = "Forbidden"


class InvalidActionError(WorkflowError):
    """Raised when an action is not recognised for the review stage."""

    code = "invalid_action"
    status_code = 400
    default_message = "Invalid action"


class InvalidTransitionError(InvalidActionError):
    """Raised when stage ordering is enforced and the document is not at this stage."""

    code = "invalid_transition"
    status_code = 409

    def __init__(self, message: str, from_status: str, stage: str):
        super().__init__(message)
        self.from_status = from_status
        self.stage = stage


class ValidationError(WorkflowError):
    """Raised for missing or malformed submission fields."""

    code = "validation_error"
    status_code = 422
    default_message = "Invalid input"


class ConflictError(WorkflowError):
    """Raised on unique-constraint violations and concurrent modification."""

    code = "conflict"
    status_code = 409
    default_message = "Conflict"


class InternalError(WorkflowError):
    """Store or infrastructure failure. The message never carries store details."""


class AuthenticationError(WorkflowError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Could not validate credentials"
