"""
Read-only MongoDB repositories for projects and users.

Projects and users are maintained elsewhere; the review cycle never writes
them.
"""
from typing import Dict, List, Optional

from task_review.domains import Project, User, UserRole
from task_review.interfaces.providers import DataStorageProvider
from task_review.interfaces.repositories import ProjectRepository, UserRepository


class MongoProjectRepository(ProjectRepository):
    """MongoDB implementation of the ProjectRepository interface."""

    def __init__(self, db_adapter: DataStorageProvider):
        self.db = db_adapter
        self.collection = "projects"

    def get_by_id(self, project_id: str) -> Optional[Project]:
        doc = self.db.find_one(self.collection, {"id": project_id})
        if not doc:
            return None
        return Project.model_validate(doc)

    def find_by_manager(self, manager_id: str) -> List[Project]:
        docs = self.db.find(self.collection, {"manager_id": manager_id})
        return [Project.model_validate(doc) for doc in docs]


class MongoUserRepository(UserRepository):
    """MongoDB implementation of the UserRepository interface."""

    def __init__(self, db_adapter: DataStorageProvider):
        self.db = db_adapter
        self.collection = "users"

    def get_by_id(self, user_id: str) -> Optional[User]:
        doc = self.db.find_one(self.collection, {"id": user_id})
        if not doc:
            return None
        return User.model_validate(doc)

    def get_many(self, user_ids: List[str]) -> Dict[str, User]:
        if not user_ids:
            return {}
        docs = self.db.find(self.collection, {"id": {"$in": list(set(user_ids))}})
        users = [User.model_validate(doc) for doc in docs]
        return {user.id: user for user in users}

    def find_by_role(self, role: UserRole) -> List[User]:
        docs = self.db.find(self.collection, {"role": UserRole(role).value})
        return [User.model_validate(doc) for doc in docs]
