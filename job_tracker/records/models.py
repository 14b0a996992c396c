"""Data models for tracked job applications."""

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    """Workflow status of a job application."""

    APPLIED = "applied"
    UNDER_REVIEW = "underReview"
    INTERVIEW_SCHEDULED = "interviewScheduled"
    INTERVIEWED = "interviewed"
    ASSESSMENT = "assessment"
    OFFER_RECEIVED = "offerReceived"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    ON_HOLD = "onHold"

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: "str | JobStatus | None") -> "JobStatus":
        """Map any stored status representation onto a member.

        Accepts members, values ("underReview"), member names
        ("UNDER_REVIEW") and display names ("Under Review"). Anything else,
        including None, falls back to APPLIED.
        """
        if isinstance(value, JobStatus):
            return value
        if not isinstance(value, str):
            return cls.APPLIED
        key = re.sub(r"[\s_]+", "", value).lower()
        return _STATUS_LOOKUP.get(key, cls.APPLIED)


_STATUS_DISPLAY_NAMES: dict[JobStatus, str] = {
    JobStatus.APPLIED: "Applied",
    JobStatus.UNDER_REVIEW: "Under Review",
    JobStatus.INTERVIEW_SCHEDULED: "Interview Scheduled",
    JobStatus.INTERVIEWED: "Interviewed",
    JobStatus.ASSESSMENT: "Assessment",
    JobStatus.OFFER_RECEIVED: "Offer Received",
    JobStatus.ACCEPTED: "Accepted",
    JobStatus.REJECTED: "Rejected",
    JobStatus.WITHDRAWN: "Withdrawn",
    JobStatus.ON_HOLD: "On Hold",
}

_STATUS_LOOKUP: dict[str, JobStatus] = {
    status.value.lower(): status for status in JobStatus
}


def parse_date(value: str | date | None) -> date | None:
    """Parse an ISO-8601 date or timestamp string into a date.

    Returns None for missing, blank or malformed input; never raises.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def now_iso() -> str:
    return datetime.now().isoformat()


# Fields a caller may set when creating or updating a record.
EDITABLE_FIELDS = (
    "job_name",
    "company_name",
    "job_link",
    "contact_method",
    "cv_used",
    "notes",
    "source",
    "contact_email",
    "application_date",
    "follow_up_date",
    "interview_date",
    "status",
    "is_pinned",
    "is_archived",
    "tags",
)


@dataclass(frozen=True)
class JobRecord:
    """A single tracked job application.

    Attributes:
        id: Unique identifier (UUID4), never changes.
        job_name: Title of the position, never empty.
        company_name: Hiring company.
        job_link: URL of the posting.
        contact_method: How the application was sent (email, portal, ...).
        cv_used: Which CV version was submitted.
        notes: Free-form notes.
        source: Where the posting was found (LinkedIn, referral, ...).
        contact_email: Recruiter or hiring manager email.
        application_date: ISO date the application was sent.
        follow_up_date: ISO date to check in; drives reminders.
        interview_date: ISO date (or timestamp) of the interview.
        status: Current workflow status.
        is_pinned: Whether the user pinned the record.
        is_archived: Whether the record is archived.
        tags: User tags in insertion order.
        created_at: ISO timestamp of creation.
        updated_at: ISO timestamp of the last mutation.
    """

    id: str
    job_name: str
    created_at: str
    updated_at: str
    company_name: str | None = None
    job_link: str | None = None
    contact_method: str | None = None
    cv_used: str | None = None
    notes: str | None = None
    source: str | None = None
    contact_email: str | None = None
    application_date: str | None = None
    follow_up_date: str | None = None
    interview_date: str | None = None
    status: JobStatus = JobStatus.APPLIED
    is_pinned: bool = False
    is_archived: bool = False
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.job_name or not self.job_name.strip():
            raise ValueError("job_name must not be empty")
        if not isinstance(self.status, JobStatus):
            object.__setattr__(self, "status", JobStatus.parse(self.status))

    @property
    def status_display_name(self) -> str:
        return self.status.display_name

    @property
    def has_follow_up(self) -> bool:
        return bool(self.follow_up_date)

    def with_changes(self, changes: dict[str, Any], updated_at: str) -> "JobRecord":
        """Return a copy with ``changes`` merged in and ``updated_at`` bumped.

        Raises:
            ValueError: If a key is not an editable field, or the change
                would leave the record without a job name.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        merged = dict(changes)
        if "status" in merged:
            merged["status"] = JobStatus.parse(merged["status"])
        if "tags" in merged:
            merged["tags"] = list(merged["tags"] or [])
        for flag in ("is_pinned", "is_archived"):
            if flag in merged:
                merged[flag] = bool(merged[flag])
        return replace(self, **merged, updated_at=updated_at)

    def to_dict(self) -> dict:
        """Serialize the record to a dictionary."""
        return {
            "id": self.id,
            "job_name": self.job_name,
            "company_name": self.company_name,
            "job_link": self.job_link,
            "contact_method": self.contact_method,
            "cv_used": self.cv_used,
            "notes": self.notes,
            "source": self.source,
            "contact_email": self.contact_email,
            "application_date": self.application_date,
            "follow_up_date": self.follow_up_date,
            "interview_date": self.interview_date,
            "status": self.status.value,
            "is_pinned": self.is_pinned,
            "is_archived": self.is_archived,
            "tags": list(self.tags),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobRecord":
        """Deserialize a record from a dictionary.

        Unknown or missing statuses map to APPLIED; a missing
        ``updated_at`` falls back to ``created_at``.
        """
        created_at = data.get("created_at") or now_iso()
        return cls(
            id=data["id"],
            job_name=data["job_name"],
            created_at=created_at,
            updated_at=data.get("updated_at") or created_at,
            company_name=data.get("company_name"),
            job_link=data.get("job_link"),
            contact_method=data.get("contact_method"),
            cv_used=data.get("cv_used"),
            notes=data.get("notes"),
            source=data.get("source"),
            contact_email=data.get("contact_email"),
            application_date=data.get("application_date"),
            follow_up_date=data.get("follow_up_date"),
            interview_date=data.get("interview_date"),
            status=JobStatus.parse(data.get("status")),
            is_pinned=bool(data.get("is_pinned", False)),
            is_archived=bool(data.get("is_archived", False)),
            tags=list(data.get("tags") or []),
        )
