"""
Task Review - the proof of work review cycle of an organisational
timesheet system.

Employees submit proof that a task is done, reviewers approve it or report
defects, defects send the work back for a bounded number of rework loops,
and approval moves the employee on to their next task.
"""

# Client interface (main entry point)
from task_review.client.task_review import TaskReview

# Factory for wiring the review system
from task_review.factories.review_factory import ReviewSystem, TaskReviewFactory

# Errors and policy callers need to handle
from task_review.domains.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ReviewError,
    ReworkExhaustedError,
    ValidationError,
)
from task_review.domains.policy import ReviewPolicy

# Package metadata
__all__ = [
    # Main client interface
    "TaskReview",
    # Factories
    "TaskReviewFactory",
    "ReviewSystem",
    # Policy
    "ReviewPolicy",
    # Errors
    "ReviewError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ForbiddenError",
    "ReworkExhaustedError",
]
