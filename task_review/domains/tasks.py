"""
Task and assignment domain models.

A task owns its assignments; an assignment is one employee's work record on
the task and carries the current proof snapshot and review cycle.
"""
from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

from task_review.domains.enums import AssignmentStatus, ReviewCycleStatus
from task_review.domains.proofs import Attachment


class ProofSnapshot(BaseModel):
    """Current proof embedded in an assignment."""
    proof_id: str = Field(..., description="ID of the proof record")
    github_link: str = Field(..., description="Repository link")
    demo_video_link: str = Field(..., description="Demo video link")
    completion_notes: str = Field(..., description="What was done")
    attachments: List[Attachment] = Field(default_factory=list)
    submitted_at: datetime = Field(default_factory=datetime.now)


class ReviewCycle(BaseModel):
    """Reviewer decision snapshot for an assignment."""
    review_status: ReviewCycleStatus = Field(
        ReviewCycleStatus.PENDING_REVIEW, description="Status of the current cycle")
    reviewed_by: Optional[str] = Field(None, description="Reviewer ID")
    reviewed_at: Optional[datetime] = Field(None, description="When reviewed")
    manager_comments: Optional[str] = Field(None, description="Reviewer comments")
    defect_description: Optional[str] = Field(None, description="Defect found")
    defect_count: int = Field(0, ge=0, description="Defects found so far")
    rework_required: bool = Field(False, description="Whether rework is required")


class Assignment(BaseModel):
    """One employee's relationship to one task."""
    employee_id: str = Field(..., description="Assigned employee")
    status: AssignmentStatus = Field(
        AssignmentStatus.ASSIGNED, description="Lifecycle state")
    progress: int = Field(0, ge=0, le=100, description="Progress percent")
    deadline: Optional[datetime] = Field(None, description="When the work is due")
    proof_id: Optional[str] = Field(
        None, description="Proof record reused across the rework loop")
    proof_submission: Optional[ProofSnapshot] = Field(
        None, description="Current proof snapshot")
    review_cycle: Optional[ReviewCycle] = Field(
        None, description="Current reviewer decision snapshot")
    rework_attempts: int = Field(0, ge=0, description="Rework loops so far")
    max_rework_attempts: int = Field(3, ge=0, description="Rework ceiling")
    reassignment_required: bool = Field(
        False, description="Set once the rework ceiling is hit")
    submitted_at: Optional[datetime] = Field(None, description="Last submission time")
    final_approved_at: Optional[datetime] = Field(None, description="Approval time")
    version: int = Field(0, ge=0, description="Optimistic concurrency counter")

    @property
    def defect_count(self) -> int:
        return self.review_cycle.defect_count if self.review_cycle else 0

    @property
    def rework_exhausted(self) -> bool:
        return self.rework_attempts >= self.max_rework_attempts


class Task(BaseModel):
    """Unit of work belonging to a project."""
    id: str = Field(..., description="Unique identifier")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    project_id: str = Field(..., description="Owning project")
    created_by: str = Field(..., description="Manager who created the task")
    created_at: datetime = Field(
        default_factory=datetime.now, description="When the task was created")
    assignments: List[Assignment] = Field(
        default_factory=list, description="Employee assignments")

    def find_assignment(self, employee_id: str) -> Optional[Tuple[int, Assignment]]:
        """Return (index, assignment) for an employee, or None."""
        for index, assignment in enumerate(self.assignments):
            if assignment.employee_id == employee_id:
                return index, assignment
        return None
