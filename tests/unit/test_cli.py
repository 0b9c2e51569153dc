"""
Tests for the command line interface.
"""
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from task_review.cli import app
from task_review.domains import (
    AssignmentStatus,
    AssignmentSummary,
    ConflictError,
    ForbiddenError,
    NextTaskResult,
    NextTaskStatus,
    ProofDecision,
    ReviewAnalytics,
    ReviewResult,
    StatusSnapshot,
    SubmissionResult,
    SubmissionStatus,
)

runner = CliRunner()


@pytest.fixture
def mock_client():
    """Patch the client class the CLI builds from --config."""
    with patch("task_review.cli.TaskReview") as client_cls:
        client = MagicMock()
        client.submit_proof = AsyncMock()
        client.resubmit_proof = AsyncMock()
        client.review_proof = AsyncMock()
        client_cls.return_value = client
        yield client_cls, client


class TestCli:
    """Tests for the task-review commands."""

    def test_config_not_found(self, mock_client):
        client_cls, _ = mock_client
        client_cls.side_effect = FileNotFoundError()

        result = runner.invoke(app, ["pending", "--config", "missing.json"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_invalid_config(self, mock_client):
        client_cls, _ = mock_client
        client_cls.side_effect = ValueError("MongoDB configuration is required.")

        result = runner.invoke(app, ["pending"])

        assert result.exit_code == 1
        assert "MongoDB configuration is required." in result.output

    def test_pending(self, mock_client):
        client_cls, client = mock_client
        client.list_pending_reviews.return_value = [AssignmentSummary(
            task_id="task-1", title="Export", project_id="project-1",
            project_name="Timesheets", employee_id="emp-1", employee_name="Eve",
            status=AssignmentStatus.PENDING_REVIEW, proof_id="p-1",
            submitted_at=datetime(2026, 1, 5, 9, 30), defect_count=1,
        )]

        result = runner.invoke(app, ["pending", "--reviewer", "manager-1", "--config", "c.json"])

        assert result.exit_code == 0
        client_cls.assert_called_once_with(config_path="c.json")
        client.list_pending_reviews.assert_called_once_with("manager-1")
        assert "Pending reviews (1)" in result.output
        assert "Timesheets" in result.output

    def test_pending_forbidden(self, mock_client):
        _, client = mock_client
        client.list_pending_reviews.side_effect = ForbiddenError(
            "Only managers and admins can view reviews")

        result = runner.invoke(app, ["pending", "--reviewer", "emp-1"])

        assert result.exit_code == 1
        assert "forbidden" in result.output

    def test_status(self, mock_client):
        _, client = mock_client
        client.get_proof_status.return_value = StatusSnapshot(
            proof_id="p-1", task_id="task-1", employee_id="emp-1",
            assignment_status=AssignmentStatus.PENDING_REVIEW,
            submission_status=SubmissionStatus.PENDING_REVIEW,
            review_decision=ProofDecision.PENDING,
            submitted_at=datetime(2026, 1, 5), github_link="https://github.com/a/b",
            demo_video_link="https://youtu.be/x", rework_attempts=3,
            max_rework_attempts=3, reassignment_required=True,
        )

        result = runner.invoke(app, ["status", "p-1"])

        assert result.exit_code == 0
        assert "pending_review" in result.output
        assert "3/3" in result.output
        assert "needs manual reassignment" in result.output

    def test_submit(self, mock_client):
        _, client = mock_client
        client.submit_proof.return_value = SubmissionResult(
            proof_id="p-1", status=AssignmentStatus.PENDING_REVIEW)

        result = runner.invoke(app, [
            "submit", "task-1", "emp-1",
            "--github", "https://github.com/a/b",
            "--video", "https://youtu.be/x",
            "--notes", "Implemented the export endpoint.",
        ])

        assert result.exit_code == 0
        client.submit_proof.assert_awaited_once_with(
            "task-1", "emp-1", "https://github.com/a/b", "https://youtu.be/x",
            "Implemented the export endpoint.")
        assert "Submitted" in result.output

    def test_resubmit_conflict(self, mock_client):
        _, client = mock_client
        client.resubmit_proof.side_effect = ConflictError(
            "Task is not awaiting rework", current_status="pending_review")

        result = runner.invoke(app, [
            "resubmit", "p-1", "emp-1",
            "--github", "https://github.com/a/b",
            "--video", "https://youtu.be/x",
            "--notes", "Fixed the null check.",
        ])

        assert result.exit_code == 1
        assert "Task is not awaiting rework" in result.output
        assert "pending_review" in result.output

    def test_review_with_next_task(self, mock_client):
        _, client = mock_client
        client.review_proof.return_value = ReviewResult(
            review_id="r-1", new_status=AssignmentStatus.APPROVED,
            next_task=NextTaskResult(
                status=NextTaskStatus.TASK_ASSIGNED, employee_id="emp-1",
                project_id="project-1", task_id="task-2", title="Export timesheet",
                deadline=datetime(2026, 1, 12),
            ),
        )

        result = runner.invoke(app, [
            "review", "p-1", "manager-1", "--decision", "approved", "--comments", "Looks good",
        ])

        assert result.exit_code == 0
        client.review_proof.assert_awaited_once_with(
            "p-1", "manager-1", "approved", "Looks good", None, None)
        assert "Export timesheet" in result.output

    def test_review_all_tasks_completed(self, mock_client):
        _, client = mock_client
        client.review_proof.return_value = ReviewResult(
            review_id="r-1", new_status=AssignmentStatus.APPROVED,
            next_task=NextTaskResult(
                status=NextTaskStatus.ALL_TASKS_COMPLETED, employee_id="emp-1",
                project_id="project-2"),
        )

        result = runner.invoke(app, [
            "review", "p-1", "manager-2", "--decision", "approved", "--comments", "Looks good",
        ])

        assert "all tasks completed" in result.output

    def test_analytics(self, mock_client):
        _, client = mock_client
        client.get_review_analytics.return_value = ReviewAnalytics(
            period="Last 14 days", since=datetime(2026, 1, 1), total_submissions=3,
            approved=1, defects=1, pending=1, approval_rate=33, defect_rate=33,
            avg_rework_attempts=0.67,
        )

        result = runner.invoke(app, ["analytics", "--days", "14"])

        assert result.exit_code == 0
        client.get_review_analytics.assert_called_once_with(14, None)
        assert "0.67" in result.output
        assert "33%" in result.output
