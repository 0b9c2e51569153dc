"""
Common enumerations used across the task review system.
"""
from enum import Enum


class AssignmentStatus(str, Enum):
    """Review lifecycle state of one employee's assignment on a task."""
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    PENDING_REVIEW = "pending_review"
    REWORK_REQUIRED = "rework_required"
    APPROVED = "approved"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (AssignmentStatus.APPROVED, AssignmentStatus.COMPLETED)


class SubmissionStatus(str, Enum):
    """Status of a proof submission record."""
    SUBMITTED = "submitted"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(str, Enum):
    """Decision a reviewer can record against a proof."""
    APPROVED = "approved"
    DEFECT_FOUND = "defect_found"


class ProofDecision(str, Enum):
    """Current decision stored on a proof submission record."""
    PENDING = "pending"
    APPROVED = "approved"
    DEFECT_FOUND = "defect_found"


class ReviewCycleStatus(str, Enum):
    """Status of the review cycle snapshot on an assignment."""
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    DEFECT_FOUND = "defect_found"


class TaskStatusAfterReview(str, Enum):
    """Assignment outcome recorded on a review."""
    COMPLETED = "completed"
    REWORK_REQUIRED = "rework_required"


class DefectSeverity(str, Enum):
    """Severity of a reviewer-identified defect."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class UserRole(str, Enum):
    """Organisation role of a user."""
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class AttachmentType(str, Enum):
    """Kinds of files that can be attached to a proof."""
    IMAGE = "image"
    PDF = "pdf"
    DOCUMENT = "document"
    CODE = "code"
    OTHER = "other"


class NotificationType(str, Enum):
    """Event types delivered to the notification sink."""
    PROOF_SUBMITTED = "task_proof_submitted"
    PROOF_RESUBMITTED = "proof_resubmitted"
    PROOF_APPROVED = "proof_approved"
    REWORK_REQUIRED = "proof_rejected"
    REWORK_EXHAUSTED = "rework_exhausted"
    TASK_ASSIGNED = "task_assigned"


class NextTaskStatus(str, Enum):
    """Outcome of a next-task assignment attempt."""
    TASK_ASSIGNED = "task_assigned"
    ALL_TASKS_COMPLETED = "all_tasks_completed"
