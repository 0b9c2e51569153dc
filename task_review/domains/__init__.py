"""
Domain models for the task review system.

This package contains the business objects and value types of the task
completion review cycle.
"""

from task_review.domains.enums import *
from task_review.domains.errors import *
from task_review.domains.proofs import *
from task_review.domains.tasks import *
from task_review.domains.reviews import *
from task_review.domains.directory import *
from task_review.domains.notifications import *
from task_review.domains.reports import *
from task_review.domains.policy import *
