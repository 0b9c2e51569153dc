"""
Tests for the TaskReview client facade.
"""
import json
from unittest.mock import patch

import pytest

from task_review.client.task_review import TaskReview
from task_review.domains import AssignmentStatus, NextTaskStatus
from tests.conftest import VALID_PROOF, make_adapter, seed


@pytest.fixture
def client():
    adapter = make_adapter()
    seed(adapter)
    return TaskReview(config={"review": {}}, db_adapter=adapter)


class TestTaskReviewInit:
    """Tests for loading configuration."""

    def test_requires_config(self):
        with pytest.raises(ValueError, match="Either config or config_path must be provided"):
            TaskReview()

    @patch("task_review.factories.review_factory.MongoDBAdapter")
    def test_json_config(self, mock_adapter_cls, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "mongo": {"connection_string": "mongodb://localhost:27017", "database": "reviews"},
            "review": {"max_rework_attempts": 4},
        }))

        client = TaskReview(config_path=str(path))

        assert client.system.policy.max_rework_attempts == 4
        mock_adapter_cls.assert_called_once()

    @patch("task_review.factories.review_factory.MongoDBAdapter")
    def test_python_config(self, mock_adapter_cls, tmp_path):
        path = tmp_path / "config.py"
        path.write_text(
            "config = {\n"
            "    'mongo': {'connection_string': 'mongodb://db', 'database': 'reviews'},\n"
            "    'review': {'min_notes_length': 30},\n"
            "}\n"
        )

        client = TaskReview(config_path=str(path))

        assert client.system.policy.min_notes_length == 30

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TaskReview(config_path=str(tmp_path / "absent.json"))


class TestTaskReviewOperations:
    """Tests that the facade drives the full cycle."""

    @pytest.mark.asyncio
    async def test_review_cycle(self, client):
        submitted = await client.submit_proof("task-1", "emp-1", **VALID_PROOF)
        assert client.list_pending_reviews("manager-1")[0].proof_id == submitted.proof_id

        rework = await client.review_proof(
            submitted.proof_id, "manager-1", "defect_found", "Fix null check",
            "NPE on line 40", "high")
        assert rework.new_status is AssignmentStatus.REWORK_REQUIRED

        await client.resubmit_proof(submitted.proof_id, "emp-1", **VALID_PROOF)
        approved = await client.review_proof(
            submitted.proof_id, "manager-1", "approved", "Looks good")
        assert approved.next_task.task_id == "task-2"

        status = client.get_proof_status(submitted.proof_id)
        assert status.is_approved is True
        assert len(status.history) == 2

        assert client.get_review_analytics().approved == 1
        assert len(client.list_employee_submissions("emp-1")) == 1
        assert client.get_employee_task_status("emp-1").summary["approved"] == 1

    @pytest.mark.asyncio
    async def test_assignment_operations(self, client):
        progress = await client.update_progress("task-3", "emp-1", progress=25)
        assert progress.progress == 25

        result = await client.assign_next_task("emp-2", "project-1")
        assert result.status is NextTaskStatus.TASK_ASSIGNED
