"""
Error taxonomy for the review cycle.

Every error is scoped to a single request and carries enough detail for the
caller to act on it.
"""
from typing import Any, Dict, Optional


class ReviewError(Exception):
    """Base class for review cycle errors."""

    code = "review_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the error for API or CLI callers."""
        return {"error": self.code, "message": self.message}


class ValidationError(ReviewError, ValueError):
    """Malformed or missing input."""

    code = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class NotFoundError(ReviewError, LookupError):
    """Referenced task, assignment, proof, project or user is absent."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: Optional[str]):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "entity": self.entity, "entity_id": self.entity_id}


class ConflictError(ReviewError, ValueError):
    """Operation attempted against an assignment in the wrong state."""

    code = "conflict"

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "current_status": self.current_status}


class ForbiddenError(ReviewError, PermissionError):
    """Actor is not the owner, assignee or an allowed reviewer."""

    code = "forbidden"


class ReworkExhaustedError(ReviewError):
    """Rework ceiling reached; the assignment needs manual reassignment."""

    code = "rework_exhausted"

    def __init__(self, rework_attempts: int, max_rework_attempts: int, defect_count: int = 0):
        super().__init__(
            "Maximum rework attempts exceeded. Task needs reassignment."
        )
        self.rework_attempts = rework_attempts
        self.max_rework_attempts = max_rework_attempts
        self.defect_count = defect_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "rework_attempts": self.rework_attempts,
            "max_rework_attempts": self.max_rework_attempts,
            "defect_count": self.defect_count,
        }
