"""
Workflow errors.

Every failure the core can produce is one of these. They are
deterministic rule violations, so nothing retries them: the request
layer catches WorkflowError and turns it into a response with
`status` and `to_dict()`.
"""

from typing import Optional


class WorkflowError(Exception):
    """Base for all workflow failures."""
    status = 500
    code = "WorkflowError"

    def __init__(self, message: str = "", code: Optional[str] = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        if code:
            self.code = code

    def to_dict(self) -> dict:
        """Export for API responses."""
        return {"error": self.code, "message": self.message}


class NotFound(WorkflowError):
    """Unknown id, or an id the caller may not see or act on."""
    status = 404
    code = "NotFound"


class ValidationError(WorkflowError):
    """Malformed input: out-of-range rating, short feedback, missing fields."""
    status = 400
    code = "ValidationError"


class DomainError(WorkflowError):
    """Business rule violation, e.g. reviewing a fully reviewed submission."""
    status = 409
    code = "DomainError"

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code, code=code)


class Unauthenticated(WorkflowError):
    """No caller identity."""
    status = 401
    code = "Unauthenticated"


# DomainError codes
ALREADY_FULLY_REVIEWED = "AlreadyFullyReviewed"
ALREADY_REVIEWED = "AlreadyReviewed"
ALREADY_RESPONDED = "AlreadyResponded"
