"""
Review policy: acceptance rules for proofs and reviewer decisions.

The same checks run on first submission and on every resubmission so that
both paths accept exactly the same input.
"""
import re
from typing import Any, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from task_review.domains.enums import DefectSeverity, ReviewDecision
from task_review.domains.errors import ValidationError
from task_review.domains.proofs import Attachment, ProofContent


DEFAULT_REPOSITORY_HOSTS = ["github.com", "gitlab.com", "bitbucket.org"]
DEFAULT_VIDEO_HOSTS = [
    "youtube.com",
    "youtu.be",
    "vimeo.com",
    "loom.com",
    "drive.google.com",
]


def _host_pattern(hosts: Iterable[str]) -> "re.Pattern[str]":
    alternatives = "|".join(re.escape(host) for host in hosts)
    return re.compile(rf"^https?://(www\.)?({alternatives})(/|$)", re.IGNORECASE)


def _text(field: str, value: Any) -> str:
    """Return ``value`` stripped, treating None as empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(field, f"{field} must be text")
    return value.strip()


class ReviewPolicy(BaseModel):
    """Configurable rules of the review cycle."""
    model_config = ConfigDict(extra="forbid")

    max_rework_attempts: int = Field(3, ge=1, description="Rework ceiling per assignment")
    min_notes_length: int = Field(20, ge=1, description="Minimum completion notes length")
    max_notes_length: int = Field(2000, ge=1, description="Maximum completion notes length")
    min_comment_length: int = Field(5, ge=1, description="Minimum review comment length")
    next_task_deadline_days: int = Field(
        7, ge=1, description="Deadline given to an auto-assigned next task")
    repository_hosts: List[str] = Field(
        default_factory=lambda: list(DEFAULT_REPOSITORY_HOSTS))
    video_hosts: List[str] = Field(default_factory=lambda: list(DEFAULT_VIDEO_HOSTS))

    def check_proof(
        self,
        github_link: Optional[str],
        demo_video_link: Optional[str],
        completion_notes: Optional[str],
        attachments: Optional[List[Union[Attachment, dict]]] = None,
    ) -> ProofContent:
        """Validate proof fields.

        Raises:
            ValidationError: naming the first field that breaks a rule
        """
        github_link = _text("github_link", github_link)
        demo_video_link = _text("demo_video_link", demo_video_link)
        notes = _text("completion_notes", completion_notes)

        if not github_link:
            raise ValidationError("github_link", "GitHub link required")
        if not _host_pattern(self.repository_hosts).match(github_link):
            raise ValidationError(
                "github_link",
                "Invalid GitHub link. Must be from "
                + ", ".join(self.repository_hosts),
            )

        if not demo_video_link:
            raise ValidationError("demo_video_link", "Video link required")
        if not _host_pattern(self.video_hosts).match(demo_video_link):
            raise ValidationError(
                "demo_video_link",
                "Invalid video link. Must be from " + ", ".join(self.video_hosts),
            )

        if len(notes) < self.min_notes_length:
            raise ValidationError(
                "completion_notes",
                f"Completion notes must be at least {self.min_notes_length} characters long",
            )
        if len(notes) > self.max_notes_length:
            raise ValidationError(
                "completion_notes",
                f"Completion notes cannot exceed {self.max_notes_length} characters",
            )

        return ProofContent(
            github_link=github_link,
            demo_video_link=demo_video_link,
            completion_notes=notes,
            attachments=self._parse_attachments(attachments or []),
        )

    def check_review(
        self,
        decision: Any,
        comments: Optional[str],
        defect_description: Optional[str] = None,
        defect_severity: Any = DefectSeverity.MEDIUM,
    ) -> Tuple[ReviewDecision, Optional[DefectSeverity]]:
        """Validate a reviewer decision and return the parsed enums."""
        try:
            parsed = ReviewDecision(decision)
        except ValueError:
            raise ValidationError(
                "decision", 'Decision must be "approved" or "defect_found"'
            ) from None

        if len(_text("comments", comments)) < self.min_comment_length:
            raise ValidationError(
                "comments",
                f"Review comments required (minimum {self.min_comment_length} characters)",
            )

        if parsed is ReviewDecision.APPROVED:
            return parsed, None

        if not _text("defect_description", defect_description):
            raise ValidationError("defect_description", "Defect description required")
        try:
            severity = DefectSeverity(defect_severity or DefectSeverity.MEDIUM)
        except ValueError:
            raise ValidationError(
                "defect_severity",
                "Defect severity must be one of "
                + ", ".join(s.value for s in DefectSeverity),
            ) from None
        return parsed, severity

    @staticmethod
    def _parse_attachments(items: List[Union[Attachment, dict]]) -> List[Attachment]:
        parsed = []
        for index, item in enumerate(items):
            if isinstance(item, Attachment):
                parsed.append(item)
                continue
            try:
                parsed.append(Attachment.model_validate(item))
            except PydanticValidationError as e:
                first = e.errors()[0]
                location = ".".join(str(part) for part in first["loc"])
                raise ValidationError(
                    f"attachments[{index}].{location}" if location else f"attachments[{index}]",
                    f"Invalid attachment: {first['msg']}",
                ) from None
        return parsed
