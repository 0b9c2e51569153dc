"""
Factory for creating and wiring components of the task review system.

This module handles the creation and dependency injection for all
services and components used in the review cycle.
"""

import importlib
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

# Service imports
from task_review.services.assignment import AssignmentService
from task_review.services.notification import NotificationService
from task_review.services.review import ReviewService
from task_review.services.review_queries import ReviewQueryService

# Repository imports
from task_review.repositories.directory import MongoProjectRepository, MongoUserRepository
from task_review.repositories.proof import MongoProofRepository
from task_review.repositories.review import MongoReviewRepository
from task_review.repositories.task import MongoTaskRepository

# Adapter imports
from task_review.adapters.mongodb_adapter import MongoDBAdapter
from task_review.adapters.notification_adapter import (
    MongoNotificationProvider,
    NullNotificationProvider,
)

from task_review.domains.policy import ReviewPolicy
from task_review.interfaces.providers import DataStorageProvider, NotificationProvider

logger = logging.getLogger(__name__)


class ReviewSystem:
    """Wired review cycle services."""

    def __init__(
        self,
        review_service: ReviewService,
        assignment_service: AssignmentService,
        query_service: ReviewQueryService,
        notification_service: NotificationService,
        policy: ReviewPolicy,
    ):
        self.review_service = review_service
        self.assignment_service = assignment_service
        self.query_service = query_service
        self.notification_service = notification_service
        self.policy = policy


class TaskReviewFactory:
    """Factory for creating and wiring components of the task review system."""

    @staticmethod
    def _create_policy(review_config: Dict[str, Any]) -> ReviewPolicy:
        try:
            return ReviewPolicy(**review_config)
        except PydanticValidationError as e:
            raise ValueError(f"Invalid review configuration: {e}") from e

    @staticmethod
    def _create_notification_provider(
        notification_config: Dict[str, Any], db_adapter: DataStorageProvider
    ) -> NotificationProvider:
        """Instantiates the notification sink from configuration."""
        if not notification_config.get("enabled", True):
            logger.info("Notifications disabled")
            return NullNotificationProvider()

        class_path = notification_config.get("class")
        if not class_path:
            return MongoNotificationProvider(db_adapter)

        try:
            module_path, class_name = class_path.rsplit(".", 1)
            module = importlib.import_module(module_path)
            provider_class = getattr(module, class_name)
        except (ImportError, AttributeError, ValueError) as e:
            raise ValueError(
                f"Error loading notification provider '{class_path}': {e}"
            ) from e
        provider = provider_class(**notification_config.get("config", {}))
        logger.info(f"Loaded notification provider: {class_path}")
        return provider

    @staticmethod
    def create_from_config(
        config: Dict[str, Any], db_adapter: Optional[DataStorageProvider] = None
    ) -> ReviewSystem:
        """Create the review system from configuration.

        Args:
            config: Configuration dictionary
            db_adapter: Storage adapter to use instead of connecting from
                the ``mongo`` section

        Returns:
            Configured ReviewSystem instance
        """
        if db_adapter is None:
            if "mongo" not in config:
                raise ValueError("MongoDB configuration is required.")
            if "connection_string" not in config["mongo"]:
                raise ValueError("MongoDB connection string is required.")
            if "database" not in config["mongo"]:
                raise ValueError("MongoDB database name is required.")
            db_adapter = MongoDBAdapter(
                connection_string=config["mongo"]["connection_string"],
                database_name=config["mongo"]["database"],
            )

        policy = TaskReviewFactory._create_policy(config.get("review", {}))
        logger.info(
            f"Review policy: max {policy.max_rework_attempts} rework attempts, "
            f"next task due in {policy.next_task_deadline_days} days"
        )

        # Create repositories
        task_repository = MongoTaskRepository(db_adapter)
        proof_repository = MongoProofRepository(db_adapter)
        review_repository = MongoReviewRepository(db_adapter)
        project_repository = MongoProjectRepository(db_adapter)
        user_repository = MongoUserRepository(db_adapter)

        # Create services
        notification_service = NotificationService(
            notification_provider=TaskReviewFactory._create_notification_provider(
                config.get("notifications", {}), db_adapter
            )
        )
        assignment_service = AssignmentService(
            task_repository=task_repository,
            project_repository=project_repository,
            notification_service=notification_service,
            policy=policy,
        )
        review_service = ReviewService(
            task_repository=task_repository,
            proof_repository=proof_repository,
            review_repository=review_repository,
            project_repository=project_repository,
            user_repository=user_repository,
            notification_service=notification_service,
            assignment_service=assignment_service,
            policy=policy,
        )
        query_service = ReviewQueryService(
            task_repository=task_repository,
            proof_repository=proof_repository,
            review_repository=review_repository,
            project_repository=project_repository,
            user_repository=user_repository,
        )

        return ReviewSystem(
            review_service=review_service,
            assignment_service=assignment_service,
            query_service=query_service,
            notification_service=notification_service,
            policy=policy,
        )
