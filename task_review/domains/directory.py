"""
Read-only views of projects and users.

These are owned by other parts of the organisation system; the review cycle
only reads them.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from task_review.domains.enums import UserRole


class Project(BaseModel):
    """Project a task belongs to."""
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Project name")
    manager_id: Optional[str] = Field(None, description="Managing user")
    employee_ids: List[str] = Field(default_factory=list, description="Project members")


class User(BaseModel):
    """Employee, manager or admin."""
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    email: Optional[str] = Field(None, description="Email address")
    role: UserRole = Field(UserRole.EMPLOYEE, description="Organisation role")
