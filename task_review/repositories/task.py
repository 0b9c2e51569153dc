"""
MongoDB implementation of the task repository.

Assignments are embedded in their task document and are only ever appended,
so an assignment's array index is stable and can address it in updates.
"""
from typing import List, Optional

from task_review.domains import Assignment, AssignmentStatus, Task
from task_review.interfaces.providers import DataStorageProvider
from task_review.interfaces.repositories import TaskRepository


class MongoTaskRepository(TaskRepository):
    """MongoDB implementation of the TaskRepository interface."""

    def __init__(self, db_adapter: DataStorageProvider):
        """Initialize the repository with a database adapter.

        Args:
            db_adapter: Storage adapter instance
        """
        self.db = db_adapter
        self.collection = "tasks"

        self.db.create_collection(self.collection)

        self.db.create_index(self.collection, [("project_id", 1), ("created_at", 1)])
        self.db.create_index(self.collection, [("assignments.employee_id", 1)])
        self.db.create_index(self.collection, [("assignments.status", 1)])

    def create(self, task: Task) -> str:
        return self.db.insert_one(self.collection, task.model_dump())

    def get_by_id(self, task_id: str) -> Optional[Task]:
        doc = self.db.find_one(self.collection, {"id": task_id})
        if not doc:
            return None
        return Task.model_validate(doc)

    def find_by_project(self, project_id: str) -> List[Task]:
        docs = self.db.find(
            self.collection, {"project_id": project_id}, sort=[("created_at", 1), ("id", 1)]
        )
        return [Task.model_validate(doc) for doc in docs]

    def find_by_assignment_status(
        self, status: AssignmentStatus, project_ids: Optional[List[str]] = None
    ) -> List[Task]:
        query = {"assignments.status": AssignmentStatus(status).value}
        if project_ids is not None:
            query["project_id"] = {"$in": project_ids}
        docs = self.db.find(self.collection, query)
        return [Task.model_validate(doc) for doc in docs]

    def find_by_employee(self, employee_id: str, project_id: Optional[str] = None) -> List[Task]:
        query = {"assignments.employee_id": employee_id}
        if project_id:
            query["project_id"] = project_id
        docs = self.db.find(self.collection, query, sort=[("created_at", 1)])
        return [Task.model_validate(doc) for doc in docs]

    def replace_assignment(
        self, task_id: str, index: int, expected: Assignment, updated: Assignment
    ) -> bool:
        prefix = f"assignments.{index}"
        query = {
            "id": task_id,
            f"{prefix}.employee_id": expected.employee_id,
            f"{prefix}.status": expected.status.value,
            f"{prefix}.version": expected.version,
        }
        document = updated.model_copy(update={"version": expected.version + 1}).model_dump()
        return self.db.update_one(self.collection, query, {"$set": {prefix: document}})

    def add_assignment(self, task_id: str, assignment: Assignment) -> bool:
        query = {
            "id": task_id,
            "assignments.employee_id": {"$ne": assignment.employee_id},
        }
        return self.db.update_one(
            self.collection, query, {"$push": {"assignments": assignment.model_dump()}}
        )
