"""
Notification adapters for the task review system.

These adapters implement the notification sink that review transitions
report to.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from task_review.domains import Notification
from task_review.interfaces.providers import DataStorageProvider, NotificationProvider

logger = logging.getLogger(__name__)


class MongoNotificationProvider(NotificationProvider):
    """Stores notifications in a collection for the in-app inbox."""

    def __init__(self, db_adapter: DataStorageProvider, collection: str = "notifications"):
        """Initialize the provider with a database adapter.

        Args:
            db_adapter: Storage adapter instance
            collection: Collection notifications are written to
        """
        self.db = db_adapter
        self.collection = collection

        self.db.create_collection(self.collection)
        self.db.create_index(self.collection, [("user_id", 1), ("created_at", -1)])

    async def enqueue(
        self,
        user_id: str,
        type: str,
        title: str,
        body: str,
        meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        notification = Notification(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=type,
            title=title,
            body=body,
            meta=meta or {},
        )
        self.db.insert_one(self.collection, notification.model_dump())
        logger.debug(f"Queued {type} notification for {user_id}")


class NullNotificationProvider(NotificationProvider):
    """Null implementation of the NotificationProvider interface.

    This provider satisfies the interface but doesn't deliver anything.
    It's useful when notifications are disabled or when running tests.
    """

    async def enqueue(
        self,
        user_id: str,
        type: str,
        title: str,
        body: str,
        meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        return None
