"""
Tests for the task review domain models and errors.
"""
from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from task_review.domains import (
    Assignment,
    AssignmentStatus,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ProofSubmission,
    ProofDecision,
    Review,
    ReviewCycle,
    ReviewDecision,
    ReviewError,
    ReworkExhaustedError,
    SubmissionStatus,
    Task,
    TaskStatusAfterReview,
    UserRole,
    ValidationError,
)


class TestAssignmentStatus:
    """Tests for the assignment lifecycle enum."""

    @pytest.mark.parametrize("status,terminal", [
        (AssignmentStatus.ASSIGNED, False),
        (AssignmentStatus.IN_PROGRESS, False),
        (AssignmentStatus.PENDING_REVIEW, False),
        (AssignmentStatus.REWORK_REQUIRED, False),
        (AssignmentStatus.APPROVED, True),
        (AssignmentStatus.COMPLETED, True),
    ])
    def test_is_terminal(self, status, terminal):
        assert status.is_terminal is terminal


class TestAssignment:
    """Tests for the Assignment model."""

    def test_defaults(self):
        """Test a freshly assigned employee."""
        assignment = Assignment(employee_id="emp-1")

        assert assignment.status == AssignmentStatus.ASSIGNED
        assert assignment.progress == 0
        assert assignment.rework_attempts == 0
        assert assignment.max_rework_attempts == 3
        assert assignment.version == 0
        assert assignment.defect_count == 0
        assert assignment.rework_exhausted is False

    def test_defect_count_reads_review_cycle(self):
        assignment = Assignment(employee_id="emp-1", review_cycle=ReviewCycle(defect_count=2))
        assert assignment.defect_count == 2

    def test_rework_exhausted_at_ceiling(self):
        assignment = Assignment(employee_id="emp-1", rework_attempts=3, max_rework_attempts=3)
        assert assignment.rework_exhausted is True

    @pytest.mark.parametrize("progress", [-1, 101])
    def test_progress_bounds(self, progress):
        with pytest.raises(PydanticValidationError):
            Assignment(employee_id="emp-1", progress=progress)

    def test_negative_counters_rejected(self):
        with pytest.raises(PydanticValidationError):
            ReviewCycle(defect_count=-1)
        with pytest.raises(PydanticValidationError):
            Assignment(employee_id="emp-1", rework_attempts=-1)


class TestTask:
    """Tests for the Task model."""

    def test_find_assignment(self):
        task = Task(
            id="task-1", title="Export", project_id="project-1", created_by="manager-1",
            assignments=[Assignment(employee_id="emp-1"), Assignment(employee_id="emp-2")],
        )

        index, assignment = task.find_assignment("emp-2")
        assert index == 1
        assert assignment.employee_id == "emp-2"
        assert task.find_assignment("emp-3") is None

    def test_round_trip_from_document(self):
        """Test validating a stored document that carries a Mongo _id."""
        doc = {
            "_id": "task-1", "id": "task-1", "title": "Export", "project_id": "project-1",
            "created_by": "manager-1", "created_at": datetime(2026, 1, 1),
            "assignments": [{"employee_id": "emp-1", "status": "pending_review", "version": 4}],
        }
        task = Task.model_validate(doc)
        assert task.assignments[0].status is AssignmentStatus.PENDING_REVIEW
        assert task.assignments[0].version == 4


class TestProofSubmission:
    """Tests for the ProofSubmission model."""

    def test_defaults(self):
        proof = ProofSubmission(
            id="proof-1", task_id="task-1", employee_id="emp-1", project_id="project-1",
            github_link="https://github.com/a/b", demo_video_link="https://youtu.be/x",
            completion_notes="Implemented the thing with tests.",
        )
        assert proof.submission_status == SubmissionStatus.SUBMITTED
        assert proof.review_decision == ProofDecision.PENDING
        assert proof.is_approved is False
        assert proof.attachments == []


class TestReview:
    """Tests for the append-only Review record."""

    @pytest.fixture
    def review(self):
        return Review(
            id="review-1", proof_id="proof-1", task_id="task-1", employee_id="emp-1",
            project_id="project-1", reviewed_by="manager-1", reviewer_role=UserRole.MANAGER,
            decision=ReviewDecision.DEFECT_FOUND, comments="Fix null check",
            defect_description="NPE on line 40", requires_rework=True,
            task_status_after_review=TaskStatusAfterReview.REWORK_REQUIRED,
            attempt_number=1,
        )

    def test_is_frozen(self, review):
        with pytest.raises(PydanticValidationError):
            review.comments = "changed"

    def test_comments_required(self, review):
        with pytest.raises(PydanticValidationError):
            Review(**{**review.model_dump(), "comments": ""})


class TestErrors:
    """Tests for the review error taxonomy."""

    def test_validation_error(self):
        error = ValidationError("completion_notes", "too short")
        assert isinstance(error, ReviewError)
        assert isinstance(error, ValueError)
        assert error.to_dict() == {
            "error": "validation_error", "message": "too short", "field": "completion_notes"}

    def test_not_found_error(self):
        error = NotFoundError("Proof", "proof-9")
        assert isinstance(error, LookupError)
        assert error.message == "Proof not found: proof-9"
        assert error.to_dict()["entity_id"] == "proof-9"

    def test_conflict_error_carries_status(self):
        error = ConflictError("Task is not awaiting review", current_status="approved")
        assert error.to_dict()["current_status"] == "approved"

    def test_forbidden_error(self):
        error = ForbiddenError("Task not assigned to you")
        assert isinstance(error, PermissionError)
        assert error.code == "forbidden"

    def test_rework_exhausted_error(self):
        error = ReworkExhaustedError(3, 3, defect_count=3)
        assert error.to_dict() == {
            "error": "rework_exhausted",
            "message": "Maximum rework attempts exceeded. Task needs reassignment.",
            "rework_attempts": 3,
            "max_rework_attempts": 3,
            "defect_count": 3,
        }
