"""
Service implementations for the task review system.

These services implement the business logic interfaces defined in
task_review.interfaces.services.
"""

from task_review.services.notification import *
from task_review.services.assignment import *
from task_review.services.review import *
from task_review.services.review_queries import *
