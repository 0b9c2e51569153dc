"""
MongoDB implementation of the proof submission repository.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from task_review.domains import ProofSubmission
from task_review.interfaces.providers import DataStorageProvider
from task_review.interfaces.repositories import ProofRepository


class MongoProofRepository(ProofRepository):
    """MongoDB implementation of the ProofRepository interface."""

    def __init__(self, db_adapter: DataStorageProvider):
        """Initialize the repository with a database adapter.

        Args:
            db_adapter: Storage adapter instance
        """
        self.db = db_adapter
        self.collection = "proof_submissions"

        self.db.create_collection(self.collection)

        self.db.create_index(self.collection, [("task_id", 1), ("employee_id", 1)])
        self.db.create_index(self.collection, [("project_id", 1), ("submitted_at", -1)])
        self.db.create_index(self.collection, [("reviewed_by", 1), ("reviewed_at", -1)])
        self.db.create_index(self.collection, [("employee_id", 1), ("submitted_at", -1)])

    def create(self, proof: ProofSubmission) -> str:
        return self.db.insert_one(self.collection, proof.model_dump())

    def get_by_id(self, proof_id: str) -> Optional[ProofSubmission]:
        doc = self.db.find_one(self.collection, {"id": proof_id})
        if not doc:
            return None
        return ProofSubmission.model_validate(doc)

    def update(self, proof_id: str, updates: Dict[str, Any]) -> bool:
        updates_with_timestamp = {
            **updates,
            "updated_at": datetime.now()
        }
        return self.db.update_one(
            self.collection,
            {"id": proof_id},
            {"$set": updates_with_timestamp}
        )

    def delete(self, proof_id: str) -> bool:
        return self.db.delete_one(self.collection, {"id": proof_id})

    def find_by_employee(self, employee_id: str) -> List[ProofSubmission]:
        docs = self.db.find(
            self.collection, {"employee_id": employee_id}, sort=[("submitted_at", -1)]
        )
        return [ProofSubmission.model_validate(doc) for doc in docs]

    def find_submitted_since(
        self, since: datetime, project_ids: Optional[List[str]] = None
    ) -> List[ProofSubmission]:
        query: Dict[str, Any] = {"submitted_at": {"$gte": since}}
        if project_ids is not None:
            query["project_id"] = {"$in": project_ids}
        docs = self.db.find(self.collection, query)
        return [ProofSubmission.model_validate(doc) for doc in docs]
