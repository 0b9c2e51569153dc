"""
Service interfaces for business logic components.

These interfaces define the contracts for the review cycle services,
ensuring proper separation of concerns and testability.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Union

from task_review.domains import (
    Assignment,
    AssignmentStatus,
    AssignmentSummary,
    Attachment,
    EmployeeTaskStatus,
    NextTaskResult,
    ProofSubmission,
    ReviewAnalytics,
    ReviewResult,
    StatusSnapshot,
    SubmissionResult,
)


class NotificationService(ABC):
    """Interface for fire-and-forget notifications."""

    @abstractmethod
    async def notify(
        self, user_id: str, type: str, title: str, body: str, meta: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Notify one user; never raises."""
        pass

    @abstractmethod
    async def notify_many(
        self, user_ids: Iterable[Optional[str]], type: str, title: str, body: str,
        meta: Optional[Dict[str, Any]] = None
    ) -> int:
        """Notify several users; never raises."""
        pass


class ReviewService(ABC):
    """Interface for the proof submission and review state machine."""

    @abstractmethod
    async def submit_proof(
        self,
        task_id: str,
        employee_id: str,
        github_link: str,
        demo_video_link: str,
        completion_notes: str,
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> SubmissionResult:
        """Submit proof of work for review."""
        pass

    @abstractmethod
    async def review_proof(
        self,
        proof_id: str,
        reviewer_id: str,
        decision: str,
        comments: str,
        defect_description: Optional[str] = None,
        defect_severity: Optional[str] = None,
    ) -> ReviewResult:
        """Record a reviewer decision."""
        pass

    @abstractmethod
    async def resubmit_proof(
        self,
        proof_id: str,
        employee_id: str,
        github_link: str,
        demo_video_link: str,
        completion_notes: str,
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> SubmissionResult:
        """Resubmit a proof after rework."""
        pass


class AssignmentService(ABC):
    """Interface for next-task assignment and progress updates."""

    @abstractmethod
    async def activate_next_task(
        self, employee_id: str, project_id: str, completed_task_id: Optional[str] = None
    ) -> NextTaskResult:
        """Move the employee's next eligible task into progress."""
        pass

    @abstractmethod
    async def assign_next_task(self, employee_id: str, project_id: str) -> NextTaskResult:
        """Manually assign the next task when no rework is outstanding."""
        pass

    @abstractmethod
    async def update_progress(
        self,
        task_id: str,
        employee_id: str,
        progress: Optional[int] = None,
        status: Optional[AssignmentStatus] = None,
    ) -> Assignment:
        """Update an assignment's progress."""
        pass


class ReviewQueryService(ABC):
    """Interface for side-effect free review read models."""

    @abstractmethod
    def list_pending_reviews(self, reviewer_id: Optional[str] = None) -> List[AssignmentSummary]:
        """List assignments awaiting review."""
        pass

    @abstractmethod
    def get_proof_status(self, proof_id: str) -> StatusSnapshot:
        """Get the current status of a proof."""
        pass

    @abstractmethod
    def get_review_analytics(
        self, days: int = 30, reviewer_id: Optional[str] = None
    ) -> ReviewAnalytics:
        """Compute review metrics over a rolling window."""
        pass

    @abstractmethod
    def list_employee_submissions(self, employee_id: str) -> List[ProofSubmission]:
        """List an employee's proofs."""
        pass

    @abstractmethod
    def get_employee_task_status(self, employee_id: str) -> EmployeeTaskStatus:
        """Group an employee's assignments by status."""
        pass
