"""
Notification service implementation.

Notifications are fire-and-forget: a failing sink is logged and never
fails the transition that triggered it.
"""
import logging
from typing import Any, Dict, Iterable, Optional

from task_review.interfaces.providers import NotificationProvider
from task_review.interfaces.services import NotificationService as NotificationServiceInterface

__all__ = ["NotificationService"]

logger = logging.getLogger(__name__)

class NotificationService(NotificationServiceInterface):
    """Service for delivering review cycle events to users."""

    def __init__(self, notification_provider: NotificationProvider):
        """Initialize the notification service.

        Args:
            notification_provider: Sink notifications are queued on
        """
        self.provider = notification_provider

    async def notify(
        self, user_id: str, type: str, title: str, body: str, meta: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Queue a notification for one user.

        Returns:
            True if the sink accepted it
        """
        try:
            await self.provider.enqueue(
                user_id=user_id, type=type, title=title, body=body, meta=meta or {}
            )
            return True
        except Exception:
            logger.exception(f"Failed to queue {type} notification for {user_id}")
            return False

    async def notify_many(
        self, user_ids: Iterable[Optional[str]], type: str, title: str, body: str,
        meta: Optional[Dict[str, Any]] = None
    ) -> int:
        """Queue the same notification for several users.

        Missing and duplicate IDs are skipped.

        Returns:
            Number of notifications the sink accepted
        """
        delivered = 0
        seen = set()
        for user_id in user_ids:
            if not user_id or user_id in seen:
                continue
            seen.add(user_id)
            if await self.notify(user_id, type, title, body, meta):
                delivered += 1
        return delivered
