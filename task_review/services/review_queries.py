"""
Read models over the review cycle.

Nothing here writes; calling any method twice without an intervening
write returns the same result.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from task_review.domains import (
    AssignmentStatus,
    AssignmentSummary,
    EmployeeTaskEntry,
    EmployeeTaskStatus,
    ForbiddenError,
    NotFoundError,
    ProofDecision,
    ProofSubmission,
    ReviewAnalytics,
    StatusSnapshot,
    UserRole,
    ValidationError,
)
from task_review.interfaces.repositories import (
    ProjectRepository,
    ProofRepository,
    ReviewRepository,
    TaskRepository,
    UserRepository,
)
from task_review.interfaces.services import ReviewQueryService as ReviewQueryServiceInterface

__all__ = ["ReviewQueryService"]

_STATUS_CATEGORIES = {
    AssignmentStatus.ASSIGNED: "assigned",
    AssignmentStatus.IN_PROGRESS: "in_progress",
    AssignmentStatus.PENDING_REVIEW: "pending_review",
    AssignmentStatus.REWORK_REQUIRED: "rework_required",
    AssignmentStatus.APPROVED: "approved",
    AssignmentStatus.COMPLETED: "approved",
}


class ReviewQueryService(ReviewQueryServiceInterface):
    """Pending queue, proof status, analytics and employee views."""

    def __init__(
        self,
        task_repository: TaskRepository,
        proof_repository: ProofRepository,
        review_repository: ReviewRepository,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
    ):
        self.tasks = task_repository
        self.proofs = proof_repository
        self.reviews = review_repository
        self.projects = project_repository
        self.users = user_repository

    def list_pending_reviews(self, reviewer_id: Optional[str] = None) -> List[AssignmentSummary]:
        """List assignments awaiting review, most recently submitted first.

        Args:
            reviewer_id: Scope to this reviewer's projects when they are a
                manager; admins and ``None`` see everything
        """
        project_ids = self._project_scope(reviewer_id)
        tasks = self.tasks.find_by_assignment_status(
            AssignmentStatus.PENDING_REVIEW, project_ids)

        pending = [
            (task, assignment)
            for task in tasks
            for assignment in task.assignments
            if assignment.status == AssignmentStatus.PENDING_REVIEW
        ]
        employees = self.users.get_many([a.employee_id for _, a in pending])
        project_names: Dict[str, Optional[str]] = {}

        summaries = []
        for task, assignment in pending:
            if task.project_id not in project_names:
                project = self.projects.get_by_id(task.project_id)
                project_names[task.project_id] = project.name if project else None
            employee = employees.get(assignment.employee_id)
            summaries.append(AssignmentSummary(
                task_id=task.id,
                title=task.title,
                description=task.description,
                project_id=task.project_id,
                project_name=project_names[task.project_id],
                employee_id=assignment.employee_id,
                employee_name=employee.name if employee else None,
                employee_email=employee.email if employee else None,
                status=assignment.status,
                deadline=assignment.deadline,
                submitted_at=assignment.submitted_at,
                proof_id=assignment.proof_id,
                proof_submission=assignment.proof_submission,
                review_cycle=assignment.review_cycle,
                defect_count=assignment.defect_count,
                rework_attempts=assignment.rework_attempts,
            ))

        summaries.sort(key=lambda s: s.submitted_at or datetime.min, reverse=True)
        return summaries

    def get_proof_status(self, proof_id: str) -> StatusSnapshot:
        """Get a proof with its assignment counters and review history."""
        proof = self.proofs.get_by_id(proof_id)
        if not proof:
            raise NotFoundError("Proof", proof_id)
        task = self.tasks.get_by_id(proof.task_id)
        found = task.find_assignment(proof.employee_id) if task else None
        if not found:
            raise NotFoundError("Assignment", f"{proof.task_id}/{proof.employee_id}")
        _, assignment = found

        reviewer = self.users.get_by_id(proof.reviewed_by) if proof.reviewed_by else None
        return StatusSnapshot(
            proof_id=proof.id,
            task_id=proof.task_id,
            employee_id=proof.employee_id,
            assignment_status=assignment.status,
            submission_status=proof.submission_status,
            review_decision=proof.review_decision,
            submitted_at=proof.submitted_at,
            reviewed_at=proof.reviewed_at,
            reviewed_by=proof.reviewed_by,
            reviewer_name=reviewer.name if reviewer else None,
            manager_comments=proof.manager_comments,
            github_link=proof.github_link,
            demo_video_link=proof.demo_video_link,
            is_approved=proof.is_approved,
            defect_count=assignment.defect_count,
            rework_attempts=assignment.rework_attempts,
            max_rework_attempts=assignment.max_rework_attempts,
            reassignment_required=assignment.reassignment_required,
            history=self.reviews.find_by_proof(proof.id),
        )

    def get_review_analytics(
        self, days: int = 30, reviewer_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> ReviewAnalytics:
        """Compute review metrics over proofs submitted in the last ``days``.

        Rework attempts per proof are counted from the review log rather
        than copied counters.
        """
        if days < 1:
            raise ValidationError("days", "Window must be at least one day")
        since = (now or datetime.now()) - timedelta(days=days)
        proofs = self.proofs.find_submitted_since(since, self._project_scope(reviewer_id))

        total = len(proofs)
        approved = sum(1 for p in proofs if p.review_decision == ProofDecision.APPROVED)
        defects = sum(1 for p in proofs if p.review_decision == ProofDecision.DEFECT_FOUND)
        pending = sum(1 for p in proofs if p.review_decision == ProofDecision.PENDING)
        rework = self.reviews.count_defects_by_proof([p.id for p in proofs])

        analytics = ReviewAnalytics(period=f"Last {days} days", since=since)
        if not total:
            return analytics
        return analytics.model_copy(update={
            "total_submissions": total,
            "approved": approved,
            "defects": defects,
            "pending": pending,
            "approval_rate": round(approved / total * 100),
            "defect_rate": round(defects / total * 100),
            "avg_rework_attempts": round(sum(rework.values()) / total, 2),
        })

    def list_employee_submissions(self, employee_id: str) -> List[ProofSubmission]:
        return self.proofs.find_by_employee(employee_id)

    def get_employee_task_status(self, employee_id: str) -> EmployeeTaskStatus:
        """Group an employee's assignments by lifecycle category."""
        categories: Dict[str, List[EmployeeTaskEntry]] = {
            name: [] for name in dict.fromkeys(_STATUS_CATEGORIES.values())
        }
        for task in self.tasks.find_by_employee(employee_id):
            found = task.find_assignment(employee_id)
            if not found:
                continue
            _, assignment = found
            categories[_STATUS_CATEGORIES[assignment.status]].append(EmployeeTaskEntry(
                task_id=task.id,
                title=task.title,
                description=task.description,
                project_id=task.project_id,
                status=assignment.status,
                progress=assignment.progress,
                deadline=assignment.deadline,
                submitted_at=assignment.submitted_at,
                proof_submission=assignment.proof_submission,
                review_cycle=assignment.review_cycle,
                created_at=task.created_at,
            ))

        summary = {name: len(entries) for name, entries in categories.items()}
        summary["total"] = sum(summary.values())
        return EmployeeTaskStatus(employee_id=employee_id, categories=categories, summary=summary)

    def _project_scope(self, reviewer_id: Optional[str]) -> Optional[List[str]]:
        if reviewer_id is None:
            return None
        reviewer = self.users.get_by_id(reviewer_id)
        if not reviewer:
            raise NotFoundError("User", reviewer_id)
        if reviewer.role == UserRole.ADMIN:
            return None
        if reviewer.role == UserRole.MANAGER:
            return [project.id for project in self.projects.find_by_manager(reviewer.id)]
        raise ForbiddenError("Only managers and admins can view reviews")
