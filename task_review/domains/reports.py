"""
Result and read models returned by the review services.
"""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from task_review.domains.enums import (
    AssignmentStatus,
    NextTaskStatus,
    ProofDecision,
    SubmissionStatus,
)
from task_review.domains.reviews import Review
from task_review.domains.tasks import ProofSnapshot, ReviewCycle


class SubmissionResult(BaseModel):
    """Outcome of a submission or resubmission."""
    proof_id: str
    status: AssignmentStatus
    rework_attempts: int = 0


class NextTaskResult(BaseModel):
    """Outcome of activating an employee's next task."""
    status: NextTaskStatus
    employee_id: str
    project_id: str
    task_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None


class ReviewResult(BaseModel):
    """Outcome of a reviewer decision."""
    review_id: str
    new_status: AssignmentStatus
    defect_count: int = 0
    rework_attempts: int = 0
    next_task: Optional[NextTaskResult] = None


class AssignmentSummary(BaseModel):
    """Entry of the pending review queue."""
    task_id: str
    title: str
    description: Optional[str] = None
    project_id: str
    project_name: Optional[str] = None
    employee_id: str
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    status: AssignmentStatus
    deadline: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    proof_id: Optional[str] = None
    proof_submission: Optional[ProofSnapshot] = None
    review_cycle: Optional[ReviewCycle] = None
    defect_count: int = 0
    rework_attempts: int = 0


class StatusSnapshot(BaseModel):
    """Current state of one proof and its assignment."""
    proof_id: str
    task_id: str
    employee_id: str
    assignment_status: AssignmentStatus
    submission_status: SubmissionStatus
    review_decision: ProofDecision
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewer_name: Optional[str] = None
    manager_comments: Optional[str] = None
    github_link: str
    demo_video_link: str
    is_approved: bool = False
    defect_count: int = 0
    rework_attempts: int = 0
    max_rework_attempts: int = 0
    reassignment_required: bool = False
    history: List[Review] = Field(default_factory=list)


class ReviewAnalytics(BaseModel):
    """Review cycle metrics over a time window."""
    period: str
    since: datetime
    total_submissions: int = 0
    approved: int = 0
    defects: int = 0
    pending: int = 0
    approval_rate: int = 0
    defect_rate: int = 0
    avg_rework_attempts: float = 0.0


class EmployeeTaskEntry(BaseModel):
    """One of an employee's assignments with its task details."""
    task_id: str
    title: str
    description: Optional[str] = None
    project_id: str
    status: AssignmentStatus
    progress: int = 0
    deadline: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    proof_submission: Optional[ProofSnapshot] = None
    review_cycle: Optional[ReviewCycle] = None
    created_at: datetime


class EmployeeTaskStatus(BaseModel):
    """An employee's assignments grouped by lifecycle category."""
    employee_id: str
    categories: Dict[str, List[EmployeeTaskEntry]] = Field(default_factory=dict)
    summary: Dict[str, int] = Field(default_factory=dict)
