"""
Repository implementations for data access.

This package contains repository implementations that provide
data access capabilities for the domain models.
"""

from task_review.repositories.task import *
from task_review.repositories.proof import *
from task_review.repositories.review import *
from task_review.repositories.directory import *
