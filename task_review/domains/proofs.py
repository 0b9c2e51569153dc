"""
Proof of work domain models.

A proof submission is the evidence (links, notes, attachments) an employee
hands in when they consider a task done.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from task_review.domains.enums import AttachmentType, ProofDecision, SubmissionStatus


class Attachment(BaseModel):
    """File attached to a proof submission."""
    file_name: str = Field(..., min_length=1, description="Original file name")
    file_url: str = Field(..., min_length=1, description="Where the file is stored")
    file_type: AttachmentType = Field(..., description="Kind of file")
    uploaded_at: datetime = Field(
        default_factory=datetime.now, description="When the file was uploaded")


class ProofContent(BaseModel):
    """Validated proof fields shared by submission and resubmission."""
    github_link: str = Field(..., description="Repository link")
    demo_video_link: str = Field(..., description="Demo video link")
    completion_notes: str = Field(..., description="What was done")
    attachments: List[Attachment] = Field(
        default_factory=list, description="Supporting files")


class ProofSubmission(BaseModel):
    """Proof record, reused in place across the rework loop."""
    id: str = Field(..., description="Unique identifier")
    task_id: str = Field(..., description="Task the proof belongs to")
    employee_id: str = Field(..., description="Employee who submitted it")
    project_id: str = Field(..., description="Project of the task")
    github_link: str = Field(..., description="Repository link")
    demo_video_link: str = Field(..., description="Demo video link")
    completion_notes: str = Field(..., description="What was done")
    attachments: List[Attachment] = Field(
        default_factory=list, description="Supporting files")
    submission_status: SubmissionStatus = Field(
        SubmissionStatus.SUBMITTED, description="Submission status")
    review_decision: ProofDecision = Field(
        ProofDecision.PENDING, description="Latest reviewer decision")
    reviewed_by: Optional[str] = Field(None, description="Latest reviewer")
    reviewed_at: Optional[datetime] = Field(None, description="When last reviewed")
    manager_comments: Optional[str] = Field(None, description="Latest review comments")
    defect_description: Optional[str] = Field(
        None, description="Latest defect description")
    is_approved: bool = Field(False, description="Whether the proof was accepted")
    submitted_at: datetime = Field(
        default_factory=datetime.now, description="When last (re)submitted")
    final_approved_at: Optional[datetime] = Field(
        None, description="When the proof was approved")
    created_at: datetime = Field(
        default_factory=datetime.now, description="When the record was created")
    updated_at: datetime = Field(
        default_factory=datetime.now, description="When the record was last updated")
