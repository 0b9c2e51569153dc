"""
Notification domain model.
"""
from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, Field


class Notification(BaseModel):
    """Human-readable event delivered to a user."""
    id: str = Field("", description="Unique identifier")
    user_id: str = Field(..., description="ID of the recipient")
    type: str = Field(..., description="Event type")
    title: str = Field(..., description="Short title")
    body: str = Field(..., description="Message body")
    read: bool = Field(False, description="Whether the user has read it")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Event data")
    created_at: datetime = Field(default_factory=datetime.now)
