"""Domain error taxonomy shared by every service"""

from typing import Any, Optional


class JobTrackerError(Exception):
    """Base class for failures surfaced to API callers"""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.code, "context": self.context}


class ValidationError(JobTrackerError):
    """Missing field, non-positive quantity/rate/amount, malformed interval"""

    status_code = 400
    code = "validation_error"


class NotFoundError(JobTrackerError):
    status_code = 404
    code = "not_found"


class ConflictError(JobTrackerError):
    """Scheduling overlap, duplicate appointment/invoice, or overpayment"""

    status_code = 409
    code = "conflict"


class PreconditionError(JobTrackerError):
    """A job status rule was violated; the job is left unchanged"""

    status_code = 400
    code = "precondition_failed"


class StoreError(JobTrackerError):
    status_code = 500
    code = "store_error"
