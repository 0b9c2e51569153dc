"""
Repository interfaces for data access.

These interfaces define the contracts for data access components,
allowing for different storage implementations without changing the
review logic.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from task_review.domains import (
    Assignment,
    AssignmentStatus,
    Project,
    ProofSubmission,
    Review,
    Task,
    User,
    UserRole,
)


class TaskRepository(ABC):
    """Interface for tasks and their embedded assignments."""

    @abstractmethod
    def create(self, task: Task) -> str:
        """Create a task and return its ID."""
        pass

    @abstractmethod
    def get_by_id(self, task_id: str) -> Optional[Task]:
        """Get a task by ID."""
        pass

    @abstractmethod
    def find_by_project(self, project_id: str) -> List[Task]:
        """Get a project's tasks, oldest first."""
        pass

    @abstractmethod
    def find_by_assignment_status(
        self, status: AssignmentStatus, project_ids: Optional[List[str]] = None
    ) -> List[Task]:
        """Get tasks holding at least one assignment in the given status."""
        pass

    @abstractmethod
    def find_by_employee(self, employee_id: str, project_id: Optional[str] = None) -> List[Task]:
        """Get tasks an employee is assigned to."""
        pass

    @abstractmethod
    def replace_assignment(
        self, task_id: str, index: int, expected: Assignment, updated: Assignment
    ) -> bool:
        """Replace an assignment only if it still matches the expected state.

        Returns False when another writer got there first.
        """
        pass

    @abstractmethod
    def add_assignment(self, task_id: str, assignment: Assignment) -> bool:
        """Append an assignment unless the employee is already on the task."""
        pass


class ProofRepository(ABC):
    """Interface for proof submission records."""

    @abstractmethod
    def create(self, proof: ProofSubmission) -> str:
        """Create a proof record and return its ID."""
        pass

    @abstractmethod
    def get_by_id(self, proof_id: str) -> Optional[ProofSubmission]:
        """Get a proof by ID."""
        pass

    @abstractmethod
    def update(self, proof_id: str, updates: Dict[str, Any]) -> bool:
        """Update a proof in place."""
        pass

    @abstractmethod
    def delete(self, proof_id: str) -> bool:
        """Delete a proof record."""
        pass

    @abstractmethod
    def find_by_employee(self, employee_id: str) -> List[ProofSubmission]:
        """Get an employee's proofs, newest first."""
        pass

    @abstractmethod
    def find_submitted_since(
        self, since: datetime, project_ids: Optional[List[str]] = None
    ) -> List[ProofSubmission]:
        """Get proofs (re)submitted since a point in time."""
        pass


class ReviewRepository(ABC):
    """Interface for the append-only review log."""

    @abstractmethod
    def create(self, review: Review) -> str:
        """Append a review and return its ID."""
        pass

    @abstractmethod
    def find_by_proof(self, proof_id: str) -> List[Review]:
        """Get a proof's reviews in decision order."""
        pass

    @abstractmethod
    def count_defects_by_proof(self, proof_ids: List[str]) -> Dict[str, int]:
        """Count defect_found decisions per proof."""
        pass


class ProjectRepository(ABC):
    """Read access to projects."""

    @abstractmethod
    def get_by_id(self, project_id: str) -> Optional[Project]:
        """Get a project by ID."""
        pass

    @abstractmethod
    def find_by_manager(self, manager_id: str) -> List[Project]:
        """Get projects managed by a user."""
        pass


class UserRepository(ABC):
    """Read access to users."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        pass

    @abstractmethod
    def get_many(self, user_ids: List[str]) -> Dict[str, User]:
        """Get users by ID, keyed by ID."""
        pass

    @abstractmethod
    def find_by_role(self, role: UserRole) -> List[User]:
        """Get all users with a role."""
        pass
