"""
Provider interfaces for external service adapters.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class DataStorageProvider(ABC):
    """Interface for document storage providers."""

    @abstractmethod
    def create_collection(self, name: str) -> None:
        """Create a new collection."""
        pass

    @abstractmethod
    def insert_one(self, collection: str, document: Dict) -> str:
        """Insert a document into a collection."""
        pass

    @abstractmethod
    def find_one(self, collection: str, query: Dict) -> Optional[Dict]:
        """Find a single document."""
        pass

    @abstractmethod
    def find(
        self, collection: str, query: Dict, sort: Optional[List] = None, limit: int = 0, skip: int = 0
    ) -> List[Dict]:
        """Find documents matching query."""
        pass

    @abstractmethod
    def update_one(self, collection: str, query: Dict, update: Dict, upsert: bool = False) -> bool:
        """Update the first document matching query.

        Returns True only when a document was modified, so a query that
        encodes an expected prior state acts as a conditional write.
        """
        pass

    @abstractmethod
    def delete_one(self, collection: str, query: Dict) -> bool:
        """Delete a single document."""
        pass

    @abstractmethod
    def count_documents(self, collection: str, query: Dict) -> int:
        """Count documents matching query."""
        pass

    @abstractmethod
    def aggregate(self, collection: str, pipeline: List[Dict]) -> List[Dict]:
        """Run an aggregation pipeline."""
        pass

    @abstractmethod
    def create_index(self, collection: str, keys: List, **kwargs) -> None:
        """Create an index."""
        pass


class NotificationProvider(ABC):
    """Interface for the notification sink."""

    @abstractmethod
    async def enqueue(
        self,
        user_id: str,
        type: str,
        title: str,
        body: str,
        meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Queue a notification for delivery to a user."""
        pass
