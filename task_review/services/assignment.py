"""
Next-task assignment service.

After an approval the employee's next eligible task in the same project is
moved into progress. Tasks are considered oldest first, ties by task ID; a
task is eligible when the employee has no assignment on it yet or one still
in ``assigned``.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from task_review.domains import (
    Assignment,
    AssignmentStatus,
    ConflictError,
    ForbiddenError,
    NextTaskResult,
    NextTaskStatus,
    NotFoundError,
    NotificationType,
    ReviewPolicy,
    Task,
    ValidationError,
)
from task_review.interfaces.repositories import ProjectRepository, TaskRepository
from task_review.interfaces.services import AssignmentService as AssignmentServiceInterface
from task_review.interfaces.services import NotificationService

__all__ = ["AssignmentService"]

logger = logging.getLogger(__name__)

_EDITABLE_STATUSES = (
    AssignmentStatus.ASSIGNED,
    AssignmentStatus.IN_PROGRESS,
    AssignmentStatus.REWORK_REQUIRED,
)


class AssignmentService(AssignmentServiceInterface):
    """Service activating next tasks and tracking assignment progress."""

    def __init__(
        self,
        task_repository: TaskRepository,
        project_repository: ProjectRepository,
        notification_service: NotificationService,
        policy: Optional[ReviewPolicy] = None,
    ):
        """Initialize the assignment service.

        Args:
            task_repository: Repository for tasks and assignments
            project_repository: Read access to projects
            notification_service: Sink for assignment notifications
            policy: Review policy; defaults apply when omitted
        """
        self.tasks = task_repository
        self.projects = project_repository
        self.notifications = notification_service
        self.policy = policy or ReviewPolicy()

    async def activate_next_task(
        self, employee_id: str, project_id: str, completed_task_id: Optional[str] = None
    ) -> NextTaskResult:
        """Move the employee's next eligible task into progress.

        Args:
            employee_id: Employee whose work was approved
            project_id: Project to search
            completed_task_id: Task that was just approved, always skipped

        Returns:
            ``task_assigned`` with the activated task, or
            ``all_tasks_completed`` when nothing is left
        """
        now = datetime.now()
        deadline = now + timedelta(days=self.policy.next_task_deadline_days)

        candidates = sorted(
            self.tasks.find_by_project(project_id), key=lambda t: (t.created_at, t.id))
        for task in candidates:
            if task.id == completed_task_id:
                continue
            if not self._activate(task, employee_id, deadline):
                continue

            logger.info(f"Next task {task.id} assigned to {employee_id}")
            await self._announce(task, employee_id, deadline)
            return NextTaskResult(
                status=NextTaskStatus.TASK_ASSIGNED,
                employee_id=employee_id,
                project_id=project_id,
                task_id=task.id,
                title=task.title,
                description=task.description,
                deadline=deadline,
            )

        logger.info(f"All tasks completed for {employee_id} in project {project_id}")
        return NextTaskResult(
            status=NextTaskStatus.ALL_TASKS_COMPLETED,
            employee_id=employee_id,
            project_id=project_id,
        )

    async def assign_next_task(self, employee_id: str, project_id: str) -> NextTaskResult:
        """Assign the next task on a manager's request.

        Raises:
            ConflictError: if the employee still has rework outstanding
        """
        for task in self.tasks.find_by_employee(employee_id, project_id):
            found = task.find_assignment(employee_id)
            if found and found[1].status == AssignmentStatus.REWORK_REQUIRED:
                raise ConflictError(
                    "Employee has pending defects that must be resolved first",
                    current_status=AssignmentStatus.REWORK_REQUIRED.value,
                )
        return await self.activate_next_task(employee_id, project_id)

    async def update_progress(
        self,
        task_id: str,
        employee_id: str,
        progress: Optional[int] = None,
        status: Optional[AssignmentStatus] = None,
    ) -> Assignment:
        """Update progress on an open assignment.

        Progress is clamped to 0-100. Only ``assigned`` and ``in_progress``
        can be set as status, and only from those two states.
        """
        task = self.tasks.get_by_id(task_id)
        if not task:
            raise NotFoundError("Task", task_id)
        found = task.find_assignment(employee_id)
        if not found:
            raise ForbiddenError("Task not assigned to you")
        index, current = found

        if current.status not in _EDITABLE_STATUSES:
            raise ConflictError(
                f"Progress cannot be changed while {current.status.value}",
                current_status=current.status.value,
            )

        changes = {}
        if progress is not None:
            try:
                value = int(progress)
            except (TypeError, ValueError):
                raise ValidationError("progress", "Progress must be a number") from None
            changes["progress"] = min(100, max(0, value))
        if status is not None:
            try:
                target = AssignmentStatus(status)
            except ValueError:
                raise ValidationError("status", f"Unknown status: {status}") from None
            if target not in (AssignmentStatus.ASSIGNED, AssignmentStatus.IN_PROGRESS):
                raise ValidationError(
                    "status", "Status can only be set to assigned or in_progress")
            if current.status == AssignmentStatus.REWORK_REQUIRED:
                raise ConflictError(
                    "Rework must be resubmitted before the status can change",
                    current_status=current.status.value,
                )
            changes["status"] = target

        if not changes:
            return current

        updated = current.model_copy(update=changes)
        if not self.tasks.replace_assignment(task.id, index, current, updated):
            raise ConflictError("Assignment was modified concurrently",
                                current_status=current.status.value)
        return updated.model_copy(update={"version": current.version + 1})

    def _activate(self, task: Task, employee_id: str, deadline: datetime) -> bool:
        found = task.find_assignment(employee_id)
        if found is None:
            assignment = Assignment(
                employee_id=employee_id,
                status=AssignmentStatus.IN_PROGRESS,
                progress=0,
                deadline=deadline,
                max_rework_attempts=self.policy.max_rework_attempts,
            )
            return self.tasks.add_assignment(task.id, assignment)

        index, current = found
        if current.status != AssignmentStatus.ASSIGNED:
            return False
        updated = current.model_copy(update={
            "status": AssignmentStatus.IN_PROGRESS,
            "progress": 0,
            "deadline": deadline,
        })
        return self.tasks.replace_assignment(task.id, index, current, updated)

    async def _announce(self, task: Task, employee_id: str, deadline: datetime) -> None:
        await self.notifications.notify(
            employee_id,
            NotificationType.TASK_ASSIGNED.value,
            "New Task Assigned",
            f'You have been assigned: "{task.title}"',
            {"task_id": task.id, "task_title": task.title, "deadline": deadline},
        )
        project = self.projects.get_by_id(task.project_id)
        if project and project.manager_id:
            await self.notifications.notify(
                project.manager_id,
                NotificationType.TASK_ASSIGNED.value,
                "Task Assigned to Team Member",
                f'Assigned "{task.title}" to a team member',
                {"task_id": task.id, "employee_id": employee_id},
            )
