"""
MongoDB implementation of the review audit log.
"""
from typing import Dict, List

from task_review.domains import Review, ReviewDecision
from task_review.interfaces.providers import DataStorageProvider
from task_review.interfaces.repositories import ReviewRepository


class MongoReviewRepository(ReviewRepository):
    """Append-only MongoDB implementation of the ReviewRepository interface."""

    def __init__(self, db_adapter: DataStorageProvider):
        self.db = db_adapter
        self.collection = "reviews"

        self.db.create_collection(self.collection)

        self.db.create_index(
            self.collection, [("task_id", 1), ("employee_id", 1), ("reviewed_at", -1)])
        self.db.create_index(self.collection, [("reviewed_by", 1), ("reviewed_at", -1)])
        self.db.create_index(self.collection, [("project_id", 1), ("decision", 1)])
        self.db.create_index(self.collection, [("proof_id", 1)])

    def create(self, review: Review) -> str:
        return self.db.insert_one(self.collection, review.model_dump())

    def find_by_proof(self, proof_id: str) -> List[Review]:
        docs = self.db.find(
            self.collection, {"proof_id": proof_id}, sort=[("reviewed_at", 1)]
        )
        return [Review.model_validate(doc) for doc in docs]

    def count_defects_by_proof(self, proof_ids: List[str]) -> Dict[str, int]:
        if not proof_ids:
            return {}
        pipeline = [
            {"$match": {
                "proof_id": {"$in": proof_ids},
                "decision": ReviewDecision.DEFECT_FOUND.value,
            }},
            {"$group": {"_id": "$proof_id", "count": {"$sum": 1}}},
        ]
        return {
            row["_id"]: row["count"]
            for row in self.db.aggregate(self.collection, pipeline)
        }
