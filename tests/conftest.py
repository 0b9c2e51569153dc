"""
Shared fixtures for the task review tests.

Storage runs on mongomock so repositories and services are exercised
against a real document store double instead of call-by-call mocks.
"""
import uuid
from datetime import datetime, timedelta
from unittest.mock import patch

import mongomock
import pytest

from task_review.adapters.mongodb_adapter import MongoDBAdapter
from task_review.domains import Assignment, AssignmentStatus, Project, Task, User, UserRole
from task_review.factories.review_factory import TaskReviewFactory

BASE_TIME = datetime(2026, 1, 5, 9, 0)

VALID_PROOF = {
    "github_link": "https://github.com/acme/timesheets/pull/42",
    "demo_video_link": "https://www.loom.com/share/weekly-summary",
    "completion_notes": "Implemented the weekly summary endpoint with tests.",
}


def make_adapter() -> MongoDBAdapter:
    """Create an adapter backed by a fresh mongomock database."""
    with patch("task_review.adapters.mongodb_adapter.MongoClient", mongomock.MongoClient):
        return MongoDBAdapter("mongodb://localhost:27017", f"test_{uuid.uuid4().hex[:8]}")


def seed(adapter: MongoDBAdapter) -> None:
    """Insert the users, projects and tasks the tests rely on.

    project-1 (manager-1): task-1 (emp-1 in progress, emp-2 assigned),
    task-2 (unassigned), task-3 (emp-1 assigned), oldest first.
    project-2 (manager-2): task-4 (emp-1 in progress).
    """
    users = [
        User(id="admin-1", name="Ada Admin", email="ada@example.com", role=UserRole.ADMIN),
        User(id="manager-1", name="Max Manager", email="max@example.com", role=UserRole.MANAGER),
        User(id="manager-2", name="Mia Manager", email="mia@example.com", role=UserRole.MANAGER),
        User(id="emp-1", name="Eve Employee", email="eve@example.com"),
        User(id="emp-2", name="Eli Employee", email="eli@example.com"),
    ]
    for user in users:
        adapter.insert_one("users", user.model_dump())

    projects = [
        Project(id="project-1", name="Timesheets", manager_id="manager-1",
                employee_ids=["emp-1", "emp-2"]),
        Project(id="project-2", name="Payroll", manager_id="manager-2",
                employee_ids=["emp-1"]),
    ]
    for project in projects:
        adapter.insert_one("projects", project.model_dump())

    tasks = [
        Task(id="task-1", title="Weekly summary endpoint", project_id="project-1",
             created_by="manager-1", created_at=BASE_TIME,
             assignments=[
                 Assignment(employee_id="emp-1", status=AssignmentStatus.IN_PROGRESS,
                            progress=60, deadline=BASE_TIME + timedelta(days=7)),
                 Assignment(employee_id="emp-2", status=AssignmentStatus.ASSIGNED),
             ]),
        Task(id="task-2", title="Export timesheet", project_id="project-1",
             created_by="manager-1", created_at=BASE_TIME + timedelta(days=1)),
        Task(id="task-3", title="Overtime report", project_id="project-1",
             created_by="manager-1", created_at=BASE_TIME + timedelta(days=2),
             assignments=[Assignment(employee_id="emp-1")]),
        Task(id="task-4", title="Payslip layout", project_id="project-2",
             created_by="manager-2", created_at=BASE_TIME,
             assignments=[
                 Assignment(employee_id="emp-1", status=AssignmentStatus.IN_PROGRESS),
             ]),
    ]
    for task in tasks:
        adapter.insert_one("tasks", task.model_dump())


def notifications_for(adapter: MongoDBAdapter, user_id: str) -> list:
    return adapter.find("notifications", {"user_id": user_id}, sort=[("created_at", 1)])


@pytest.fixture
def make_system():
    """Return a builder for a fresh, seeded review system."""
    def _build(**review_config):
        adapter = make_adapter()
        seed(adapter)
        system = TaskReviewFactory.create_from_config(
            {"review": review_config}, db_adapter=adapter
        )
        return adapter, system
    return _build


@pytest.fixture
def stack(make_system):
    """Seeded adapter and review system with the default policy."""
    return make_system()


@pytest.fixture
def db_adapter(stack):
    return stack[0]


@pytest.fixture
def system(stack):
    return stack[1]


@pytest.fixture
def review_service(system):
    return system.review_service


@pytest.fixture
def assignment_service(system):
    return system.assignment_service


@pytest.fixture
def query_service(system):
    return system.query_service


@pytest.fixture
def valid_proof():
    return dict(VALID_PROOF)
