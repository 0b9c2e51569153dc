"""
Review audit record.

Reviews are append-only: one is written per reviewer decision and never
updated afterwards.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from task_review.domains.enums import (
    DefectSeverity,
    ReviewDecision,
    TaskStatusAfterReview,
    UserRole,
)


class Review(BaseModel):
    """Immutable record of one reviewer decision."""
    model_config = {"frozen": True}

    id: str = Field(..., description="Unique identifier")
    proof_id: str = Field(..., description="Reviewed proof")
    task_id: str = Field(..., description="Task of the proof")
    employee_id: str = Field(..., description="Employee who submitted the proof")
    project_id: str = Field(..., description="Project of the task")
    reviewed_by: str = Field(..., description="Reviewer ID")
    reviewer_role: UserRole = Field(..., description="Reviewer role")
    decision: ReviewDecision = Field(..., description="Reviewer decision")
    comments: str = Field(..., min_length=1, description="Review comments")
    defect_description: Optional[str] = Field(None, description="Defect found")
    defect_severity: Optional[DefectSeverity] = Field(
        None, description="Severity when a defect was found")
    requires_rework: bool = Field(False, description="Whether rework was requested")
    task_status_after_review: TaskStatusAfterReview = Field(
        ..., description="Assignment outcome")
    attempt_number: int = Field(
        0, ge=0, description="Rework attempts on the assignment after this decision")
    reviewed_at: datetime = Field(
        default_factory=datetime.now, description="When the decision was made")
