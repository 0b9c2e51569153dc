"""
Review service implementation.

This service runs the proof of work review cycle:

    assigned/in_progress -> pending_review -> approved
                                  |      ^
                                  v      |
                            rework_required

Every transition is a conditional write on one assignment, keyed on the
status and version that were read, so two concurrent decisions on the same
assignment cannot both succeed. Records that depend on a transition are
written right after it; if one of those writes fails the assignment is
rolled back to the state that was read. The rework loop is bounded by the
assignment's ``max_rework_attempts``; once reached, a further defect is
refused and the assignment is flagged for manual reassignment.
"""
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Union

from task_review.domains import (
    Assignment,
    AssignmentStatus,
    Attachment,
    ConflictError,
    DefectSeverity,
    ForbiddenError,
    NextTaskStatus,
    NotFoundError,
    NotificationType,
    ProofContent,
    ProofDecision,
    ProofSnapshot,
    ProofSubmission,
    Review,
    ReviewCycle,
    ReviewCycleStatus,
    ReviewDecision,
    ReviewPolicy,
    ReviewResult,
    ReworkExhaustedError,
    SubmissionResult,
    SubmissionStatus,
    Task,
    TaskStatusAfterReview,
    User,
    UserRole,
)
from task_review.interfaces.repositories import (
    ProjectRepository,
    ProofRepository,
    ReviewRepository,
    TaskRepository,
    UserRepository,
)
from task_review.interfaces.services import AssignmentService, NotificationService
from task_review.interfaces.services import ReviewService as ReviewServiceInterface

__all__ = ["ReviewService"]

logger = logging.getLogger(__name__)

_SUBMITTABLE_STATUSES = (
    AssignmentStatus.ASSIGNED,
    AssignmentStatus.IN_PROGRESS,
    AssignmentStatus.REWORK_REQUIRED,
)


class ReviewService(ReviewServiceInterface):
    """Service for submitting, reviewing and resubmitting proofs of work."""

    def __init__(
        self,
        task_repository: TaskRepository,
        proof_repository: ProofRepository,
        review_repository: ReviewRepository,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
        notification_service: NotificationService,
        assignment_service: AssignmentService,
        policy: Optional[ReviewPolicy] = None,
    ):
        """Initialize the review service.

        Args:
            task_repository: Tasks and their embedded assignments
            proof_repository: Proof submission records
            review_repository: Append-only review log
            project_repository: Read access to projects
            user_repository: Read access to users
            notification_service: Fire-and-forget notification sink
            assignment_service: Next-task assignment on approval
            policy: Review policy; defaults apply when omitted
        """
        self.tasks = task_repository
        self.proofs = proof_repository
        self.reviews = review_repository
        self.projects = project_repository
        self.users = user_repository
        self.notifications = notification_service
        self.assignments = assignment_service
        self.policy = policy or ReviewPolicy()

    async def submit_proof(
        self,
        task_id: str,
        employee_id: str,
        github_link: str,
        demo_video_link: str,
        completion_notes: str,
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> SubmissionResult:
        """Submit proof of work and put the assignment up for review.

        An assignment in ``rework_required`` is resubmitted on its existing
        proof record.

        Raises:
            ValidationError: a proof field breaks a rule
            NotFoundError: the task does not exist
            ForbiddenError: the task is not assigned to the employee
            ConflictError: the assignment is awaiting review or finished
        """
        content = self.policy.check_proof(
            github_link, demo_video_link, completion_notes, attachments)

        task = self._get_task(task_id)
        found = task.find_assignment(employee_id)
        if not found:
            raise ForbiddenError("Task not assigned to you")
        index, assignment = found

        if assignment.status == AssignmentStatus.REWORK_REQUIRED and assignment.proof_id:
            proof = self.proofs.get_by_id(assignment.proof_id)
            if proof:
                return await self._resubmit(task, index, assignment, proof, content)

        if assignment.status not in _SUBMITTABLE_STATUSES:
            raise self._submit_conflict(assignment)

        now = datetime.now()
        proof = ProofSubmission(
            id=str(uuid.uuid4()),
            task_id=task.id,
            employee_id=employee_id,
            project_id=task.project_id,
            github_link=content.github_link,
            demo_video_link=content.demo_video_link,
            completion_notes=content.completion_notes,
            attachments=content.attachments,
            submission_status=SubmissionStatus.PENDING_REVIEW,
            submitted_at=now,
        )
        updated = assignment.model_copy(update={
            "status": AssignmentStatus.PENDING_REVIEW,
            "proof_id": proof.id,
            "proof_submission": self._snapshot(proof.id, content, now),
            "submitted_at": now,
            "review_cycle": ReviewCycle(defect_count=assignment.defect_count),
        })
        self.proofs.create(proof)
        try:
            self._commit(task, index, assignment, updated)
        except ConflictError:
            self.proofs.delete(proof.id)
            raise
        logger.info(f"Proof {proof.id} submitted for task {task.id} by {employee_id}")

        employee = self.users.get_by_id(employee_id)
        employee_name = employee.name if employee else employee_id
        admins = [admin.id for admin in self.users.find_by_role(UserRole.ADMIN)]
        await self.notifications.notify_many(
            [self._manager_id(task)] + admins,
            NotificationType.PROOF_SUBMITTED.value,
            "Task Proof Submitted for Review",
            f'{employee_name} has submitted proof for task "{task.title}"',
            {
                "task_id": task.id,
                "proof_id": proof.id,
                "employee_id": employee_id,
                "employee_name": employee_name,
                "github_link": content.github_link,
                "demo_video_link": content.demo_video_link,
                "submitted_at": now,
            },
        )
        return SubmissionResult(
            proof_id=proof.id,
            status=AssignmentStatus.PENDING_REVIEW,
            rework_attempts=updated.rework_attempts,
        )

    async def review_proof(
        self,
        proof_id: str,
        reviewer_id: str,
        decision: str,
        comments: str,
        defect_description: Optional[str] = None,
        defect_severity: Optional[str] = None,
    ) -> ReviewResult:
        """Record a reviewer decision on a pending proof.

        Raises:
            ValidationError: unknown decision, short comments or missing
                defect description
            NotFoundError: proof, task or assignment missing
            ForbiddenError: reviewer is not an admin or the project's manager
            ConflictError: the assignment is not awaiting review
            ReworkExhaustedError: a defect was reported after the rework
                ceiling was reached
        """
        parsed, severity = self.policy.check_review(
            decision, comments, defect_description,
            defect_severity or DefectSeverity.MEDIUM)
        comments = comments.strip()

        proof = self._get_proof(proof_id)
        task = self._get_task(proof.task_id)
        reviewer = self._check_reviewer(reviewer_id, task)

        found = task.find_assignment(proof.employee_id)
        if not found:
            raise NotFoundError("Assignment", f"{task.id}/{proof.employee_id}")
        index, assignment = found

        if assignment.status != AssignmentStatus.PENDING_REVIEW:
            raise ConflictError("Task is not awaiting review",
                                current_status=assignment.status.value)
        if assignment.proof_id != proof.id:
            raise ConflictError("Proof is not the assignment's current submission",
                                current_status=assignment.status.value)

        if parsed is ReviewDecision.APPROVED:
            return await self._approve(task, index, assignment, proof, reviewer, comments)
        return await self._flag_defect(
            task, index, assignment, proof, reviewer, comments,
            defect_description.strip(), severity)

    async def resubmit_proof(
        self,
        proof_id: str,
        employee_id: str,
        github_link: str,
        demo_video_link: str,
        completion_notes: str,
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> SubmissionResult:
        """Resubmit a proof after rework, updating the record in place.

        Raises:
            ValidationError: a proof field breaks a rule
            NotFoundError: the proof or its task is missing
            ForbiddenError: the caller does not own the proof
            ConflictError: the assignment is not in rework
        """
        content = self.policy.check_proof(
            github_link, demo_video_link, completion_notes, attachments)

        proof = self._get_proof(proof_id)
        if proof.employee_id != employee_id:
            raise ForbiddenError("Cannot resubmit another employee's proof")

        task = self._get_task(proof.task_id)
        found = task.find_assignment(employee_id)
        if not found:
            raise NotFoundError("Assignment", f"{task.id}/{employee_id}")
        index, assignment = found

        if assignment.status != AssignmentStatus.REWORK_REQUIRED:
            raise ConflictError("Task is not awaiting rework",
                                current_status=assignment.status.value)
        return await self._resubmit(task, index, assignment, proof, content)

    async def _resubmit(
        self,
        task: Task,
        index: int,
        assignment: Assignment,
        proof: ProofSubmission,
        content: ProofContent,
    ) -> SubmissionResult:
        now = datetime.now()
        cycle = assignment.review_cycle or ReviewCycle()
        updated = assignment.model_copy(update={
            "status": AssignmentStatus.PENDING_REVIEW,
            "proof_id": proof.id,
            "proof_submission": self._snapshot(proof.id, content, now),
            "submitted_at": now,
            "review_cycle": cycle.model_copy(update={
                "review_status": ReviewCycleStatus.PENDING_REVIEW,
                "reviewed_by": None,
                "reviewed_at": None,
                "rework_required": False,
            }),
        })
        self._commit(task, index, assignment, updated)
        with self._rollback_on_error(task, index, assignment, updated, proof):
            self.proofs.update(proof.id, {
                "github_link": content.github_link,
                "demo_video_link": content.demo_video_link,
                "completion_notes": content.completion_notes,
                "attachments": [a.model_dump() for a in content.attachments],
                "submission_status": SubmissionStatus.PENDING_REVIEW.value,
                "review_decision": ProofDecision.PENDING.value,
                "reviewed_by": None,
                "reviewed_at": None,
                "submitted_at": now,
            })
        logger.info(
            f"Proof {proof.id} resubmitted for task {task.id}, "
            f"attempt {updated.rework_attempts}")

        employee = self.users.get_by_id(proof.employee_id)
        employee_name = employee.name if employee else proof.employee_id
        manager_id = self._manager_id(task)
        if manager_id:
            await self.notifications.notify(
                manager_id,
                NotificationType.PROOF_RESUBMITTED.value,
                "Rework Completed - Resubmitted",
                f'{employee_name} resubmitted proof for "{task.title}" after fixes',
                {
                    "task_id": task.id,
                    "proof_id": proof.id,
                    "employee_name": employee_name,
                    "rework_attempts": updated.rework_attempts,
                },
            )
        return SubmissionResult(
            proof_id=proof.id,
            status=AssignmentStatus.PENDING_REVIEW,
            rework_attempts=updated.rework_attempts,
        )

    async def _approve(
        self,
        task: Task,
        index: int,
        assignment: Assignment,
        proof: ProofSubmission,
        reviewer: User,
        comments: str,
    ) -> ReviewResult:
        now = datetime.now()
        cycle = assignment.review_cycle or ReviewCycle()
        updated = assignment.model_copy(update={
            "status": AssignmentStatus.APPROVED,
            "progress": 100,
            "final_approved_at": now,
            "reassignment_required": False,
            "review_cycle": cycle.model_copy(update={
                "review_status": ReviewCycleStatus.APPROVED,
                "reviewed_by": reviewer.id,
                "reviewed_at": now,
                "manager_comments": comments,
                "rework_required": False,
            }),
        })

        review = Review(
            id=str(uuid.uuid4()),
            proof_id=proof.id,
            task_id=task.id,
            employee_id=proof.employee_id,
            project_id=task.project_id,
            reviewed_by=reviewer.id,
            reviewer_role=reviewer.role,
            decision=ReviewDecision.APPROVED,
            comments=comments,
            task_status_after_review=TaskStatusAfterReview.COMPLETED,
            attempt_number=updated.rework_attempts,
            reviewed_at=now,
        )
        self._commit(task, index, assignment, updated)
        with self._rollback_on_error(task, index, assignment, updated, proof):
            self.proofs.update(proof.id, {
                "submission_status": SubmissionStatus.APPROVED.value,
                "review_decision": ProofDecision.APPROVED.value,
                "reviewed_by": reviewer.id,
                "reviewed_at": now,
                "manager_comments": comments,
                "is_approved": True,
                "final_approved_at": now,
            })
            self.reviews.create(review)
        logger.info(f"Proof {proof.id} approved by {reviewer.id}")

        next_task = await self.assignments.activate_next_task(
            proof.employee_id, task.project_id, completed_task_id=task.id)

        await self.notifications.notify(
            proof.employee_id,
            NotificationType.PROOF_APPROVED.value,
            "Proof Approved",
            f'Your proof for "{task.title}" has been approved by {reviewer.name}',
            {
                "task_id": task.id,
                "proof_id": proof.id,
                "decision": ReviewDecision.APPROVED.value,
                "comments": comments,
                "reviewed_at": now,
                "all_tasks_completed":
                    next_task.status == NextTaskStatus.ALL_TASKS_COMPLETED,
            },
        )
        return ReviewResult(
            review_id=review.id,
            new_status=AssignmentStatus.APPROVED,
            defect_count=updated.defect_count,
            rework_attempts=updated.rework_attempts,
            next_task=next_task,
        )

    async def _flag_defect(
        self,
        task: Task,
        index: int,
        assignment: Assignment,
        proof: ProofSubmission,
        reviewer: User,
        comments: str,
        defect_description: str,
        severity: DefectSeverity,
    ) -> ReviewResult:
        if assignment.rework_exhausted:
            await self._flag_for_reassignment(task, index, assignment, proof, reviewer)
            raise ReworkExhaustedError(
                assignment.rework_attempts,
                assignment.max_rework_attempts,
                assignment.defect_count,
            )

        now = datetime.now()
        cycle = assignment.review_cycle or ReviewCycle()
        defect_count = cycle.defect_count + 1
        updated = assignment.model_copy(update={
            "status": AssignmentStatus.REWORK_REQUIRED,
            "rework_attempts": assignment.rework_attempts + 1,
            "proof_submission": None,
            "review_cycle": cycle.model_copy(update={
                "review_status": ReviewCycleStatus.DEFECT_FOUND,
                "reviewed_by": reviewer.id,
                "reviewed_at": now,
                "manager_comments": comments,
                "defect_description": defect_description,
                "defect_count": defect_count,
                "rework_required": True,
            }),
        })

        review = Review(
            id=str(uuid.uuid4()),
            proof_id=proof.id,
            task_id=task.id,
            employee_id=proof.employee_id,
            project_id=task.project_id,
            reviewed_by=reviewer.id,
            reviewer_role=reviewer.role,
            decision=ReviewDecision.DEFECT_FOUND,
            comments=comments,
            defect_description=defect_description,
            defect_severity=severity,
            requires_rework=True,
            task_status_after_review=TaskStatusAfterReview.REWORK_REQUIRED,
            attempt_number=updated.rework_attempts,
            reviewed_at=now,
        )
        self._commit(task, index, assignment, updated)
        with self._rollback_on_error(task, index, assignment, updated, proof):
            self.proofs.update(proof.id, {
                "submission_status": SubmissionStatus.REJECTED.value,
                "review_decision": ProofDecision.DEFECT_FOUND.value,
                "reviewed_by": reviewer.id,
                "reviewed_at": now,
                "manager_comments": comments,
                "defect_description": defect_description,
            })
            self.reviews.create(review)
        logger.info(
            f"Defect found on proof {proof.id} by {reviewer.id}, "
            f"rework attempt {updated.rework_attempts}/{updated.max_rework_attempts}")

        await self.notifications.notify(
            proof.employee_id,
            NotificationType.REWORK_REQUIRED.value,
            "Rework Required",
            f'Your proof for "{task.title}" needs rework. '
            f"Defect count: {defect_count}. Reason: {defect_description}",
            {
                "task_id": task.id,
                "proof_id": proof.id,
                "decision": ReviewDecision.DEFECT_FOUND.value,
                "comments": comments,
                "defect_description": defect_description,
                "defect_severity": severity.value,
                "defect_count": defect_count,
                "rework_attempts": updated.rework_attempts,
                "max_rework_attempts": updated.max_rework_attempts,
                "reviewed_at": now,
            },
        )
        return ReviewResult(
            review_id=review.id,
            new_status=AssignmentStatus.REWORK_REQUIRED,
            defect_count=defect_count,
            rework_attempts=updated.rework_attempts,
        )

    async def _flag_for_reassignment(
        self,
        task: Task,
        index: int,
        assignment: Assignment,
        proof: ProofSubmission,
        reviewer: User,
    ) -> None:
        logger.warning(
            f"Rework attempts exhausted on proof {proof.id} "
            f"({assignment.rework_attempts}/{assignment.max_rework_attempts})")
        if assignment.reassignment_required:
            return
        flagged = assignment.model_copy(update={"reassignment_required": True})
        if not self.tasks.replace_assignment(task.id, index, assignment, flagged):
            raise ConflictError("Assignment was modified concurrently",
                                current_status=assignment.status.value)

        await self.notifications.notify_many(
            [self._manager_id(task), reviewer.id],
            NotificationType.REWORK_EXHAUSTED.value,
            "Task Needs Reassignment",
            f'Rework attempts for "{task.title}" are exhausted; '
            f"the task needs manual reassignment",
            {
                "task_id": task.id,
                "proof_id": proof.id,
                "employee_id": proof.employee_id,
                "rework_attempts": assignment.rework_attempts,
                "max_rework_attempts": assignment.max_rework_attempts,
            },
        )

    def _commit(self, task: Task, index: int, expected: Assignment, updated: Assignment) -> None:
        if not self.tasks.replace_assignment(task.id, index, expected, updated):
            current = self.tasks.get_by_id(task.id)
            found = current.find_assignment(expected.employee_id) if current else None
            status = found[1].status.value if found else None
            logger.warning(
                f"Lost update on task {task.id} for {expected.employee_id}; now {status}")
            raise ConflictError("Assignment was modified concurrently", current_status=status)

    @contextmanager
    def _rollback_on_error(
        self,
        task: Task,
        index: int,
        original: Assignment,
        committed: Assignment,
        proof: ProofSubmission,
    ) -> Iterator[None]:
        """Undo a committed transition, restoring the assignment and proof as read."""
        try:
            yield
        except Exception:
            logger.exception(
                f"Write after transition failed on task {task.id} for "
                f"{original.employee_id}; rolling back to {original.status.value}")
            stored = committed.model_copy(update={"version": original.version + 1})
            if not self.tasks.replace_assignment(task.id, index, stored, original):
                logger.error(f"Rollback on task {task.id} lost to a concurrent update")
                raise
            self.proofs.update(proof.id, proof.model_dump(exclude={"id", "updated_at"}))
            raise

    def _get_task(self, task_id: str) -> Task:
        task = self.tasks.get_by_id(task_id)
        if not task:
            raise NotFoundError("Task", task_id)
        return task

    def _get_proof(self, proof_id: str) -> ProofSubmission:
        proof = self.proofs.get_by_id(proof_id)
        if not proof:
            raise NotFoundError("Proof", proof_id)
        return proof

    def _check_reviewer(self, reviewer_id: str, task: Task) -> User:
        reviewer = self.users.get_by_id(reviewer_id)
        if not reviewer:
            raise NotFoundError("User", reviewer_id)
        if reviewer.role == UserRole.ADMIN:
            return reviewer
        if reviewer.role == UserRole.MANAGER and self._manager_id(task) == reviewer.id:
            return reviewer
        raise ForbiddenError("You can only review tasks from your projects")

    def _manager_id(self, task: Task) -> Optional[str]:
        project = self.projects.get_by_id(task.project_id)
        return project.manager_id if project else None

    @staticmethod
    def _snapshot(proof_id: str, content: ProofContent, submitted_at: datetime) -> ProofSnapshot:
        return ProofSnapshot(
            proof_id=proof_id,
            github_link=content.github_link,
            demo_video_link=content.demo_video_link,
            completion_notes=content.completion_notes,
            attachments=content.attachments,
            submitted_at=submitted_at,
        )

    @staticmethod
    def _submit_conflict(assignment: Assignment) -> ConflictError:
        if assignment.status == AssignmentStatus.PENDING_REVIEW:
            message = "Task is already submitted and awaiting review"
        else:
            message = "Task is already approved"
        return ConflictError(message, current_status=assignment.status.value)
