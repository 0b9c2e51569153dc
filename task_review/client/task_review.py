"""
Simplified client interface for the task review system.

This module provides a clean API for callers (HTTP handlers, the CLI,
scripts) without dealing with wiring details.
"""

import json
import importlib.util
from typing import Any, Dict, List, Optional, Union

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
from task_review.factories.review_factory import TaskReviewFactory
from task_review.interfaces.providers import DataStorageProvider


class TaskReview:
    """Facade over the review cycle services."""

    def __init__(
        self,
        config_path: str = None,
        config: Dict[str, Any] = None,
        db_adapter: Optional[DataStorageProvider] = None,
    ):
        """Initialize the review system from config file or dictionary.

        Args:
            config_path: Path to configuration file (JSON or Python)
            config: Configuration dictionary
            db_adapter: Optional storage adapter overriding the mongo section
        """
        if not config and not config_path:
            raise ValueError("Either config or config_path must be provided")

        if config_path:
            with open(config_path, "r") as f:
                if config_path.endswith(".json"):
                    config = json.load(f)
                else:
                    # Assume it's a Python file
                    spec = importlib.util.spec_from_file_location("config", config_path)
                    config_module = importlib.util.module_from_spec(spec)
                    spec.loader.exec_module(config_module)
                    config = config_module.config

        self.system = TaskReviewFactory.create_from_config(config, db_adapter=db_adapter)

    async def submit_proof(
        self,
        task_id: str,
        employee_id: str,
        github_link: str,
        demo_video_link: str,
        completion_notes: str,
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> SubmissionResult:
        return await self.system.review_service.submit_proof(
            task_id, employee_id, github_link, demo_video_link, completion_notes, attachments
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
        return await self.system.review_service.review_proof(
            proof_id, reviewer_id, decision, comments, defect_description, defect_severity
        )

    async def resubmit_proof(
        self,
        proof_id: str,
        employee_id: str,
        github_link: str,
        demo_video_link: str,
        completion_notes: str,
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> SubmissionResult:
        return await self.system.review_service.resubmit_proof(
            proof_id, employee_id, github_link, demo_video_link, completion_notes, attachments
        )

    async def assign_next_task(self, employee_id: str, project_id: str) -> NextTaskResult:
        return await self.system.assignment_service.assign_next_task(employee_id, project_id)

    async def update_progress(
        self,
        task_id: str,
        employee_id: str,
        progress: Optional[int] = None,
        status: Optional[AssignmentStatus] = None,
    ) -> Assignment:
        return await self.system.assignment_service.update_progress(
            task_id, employee_id, progress, status
        )

    def list_pending_reviews(self, reviewer_id: Optional[str] = None) -> List[AssignmentSummary]:
        return self.system.query_service.list_pending_reviews(reviewer_id)

    def get_proof_status(self, proof_id: str) -> StatusSnapshot:
        return self.system.query_service.get_proof_status(proof_id)

    def get_review_analytics(
        self, days: int = 30, reviewer_id: Optional[str] = None
    ) -> ReviewAnalytics:
        return self.system.query_service.get_review_analytics(days, reviewer_id)

    def list_employee_submissions(self, employee_id: str) -> List[ProofSubmission]:
        return self.system.query_service.list_employee_submissions(employee_id)

    def get_employee_task_status(self, employee_id: str) -> EmployeeTaskStatus:
        return self.system.query_service.get_employee_task_status(employee_id)
