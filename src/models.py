"""Pydantic data models for the company information tool server."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2025-01-31T09:15:02.113Z``."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Record(BaseModel):
    """Immutable value produced by reshaping a provider response.

    Field names are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------------------
# Tool requests
# ---------------------------------------------------------------------------


class ToolRequest(BaseModel):
    """A single tool invocation as received from the MCP client."""

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Asynchronous collection
# ---------------------------------------------------------------------------


class CollectionStatus(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    READY = "ready"
    ERROR = "error"
    TIMED_OUT = "timed_out"


TERMINAL_STATUSES = frozenset(
    {CollectionStatus.READY, CollectionStatus.ERROR, CollectionStatus.TIMED_OUT}
)


class CollectionJob(BaseModel):
    """Client-side view of a dataset collection identified by its snapshot."""

    model_config = ConfigDict(validate_assignment=True)

    snapshot_id: str = Field(frozen=True, min_length=1)
    dataset_id: str
    status: CollectionStatus = CollectionStatus.SUBMITTED
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    attempts: int = 0
    last_progress: Optional[dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class ProgressReport(BaseModel):
    """Result of one progress poll."""

    model_config = ConfigDict(frozen=True)

    snapshot_id: str
    status: str
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_ready(self) -> bool:
        return self.status == "ready"

    @property
    def is_error(self) -> bool:
        return self.status == "error"


# ---------------------------------------------------------------------------
# Bright Data: companies
# ---------------------------------------------------------------------------


class CompanyUpdate(Record):
    text: Optional[str] = None
    likes: Any = 0
    comments: Any = 0
    date: Any = None
    post_url: Optional[str] = None
    images: list[Any] = Field(default_factory=list)


class EmployeeSummary(Record):
    count: Any = None
    profiles: list[Any] = Field(default_factory=list)


class NormalizedCompany(Record):
    url: Optional[str] = None
    name: Optional[str] = None
    industry: Any = None
    description: Optional[str] = None
    website: Optional[str] = None
    headquarters: Any = None
    founded_year: Any = None
    company_size: Any = None
    specialties: Any = None
    followers: Any = None
    company_id: Any = None
    organization_type: Any = None
    locations: Any = None
    employees: EmployeeSummary = Field(default_factory=EmployeeSummary)
    updates: list[CompanyUpdate] = Field(default_factory=list)
    similar: list[Any] = Field(default_factory=list)
    affiliated: list[Any] = Field(default_factory=list)
    logo: Optional[str] = None
    timestamp: str = Field(default_factory=utc_timestamp)


# ---------------------------------------------------------------------------
# Bright Data: company posts
# ---------------------------------------------------------------------------


class PostAuthorCompany(Record):
    id: str
    name: str
    url: Optional[str] = None
    followers: Any = 0
    profile_picture: Optional[str] = None


class CompanyPost(Record):
    id: Any = None
    url: Optional[str] = None
    text: Optional[str] = None
    html_text: Optional[str] = None
    date_posted: Any = None
    comments: Any = None


class CompanyPostsGroup(Record):
    company: PostAuthorCompany
    posts: list[CompanyPost] = Field(default_factory=list)
    posts_count: int = 0
    timestamp: str = Field(default_factory=utc_timestamp)


# ---------------------------------------------------------------------------
# Bright Data: job search
# ---------------------------------------------------------------------------


class JobCompany(Record):
    name: Optional[str] = None
    id: Any = None
    url: Optional[str] = None


class PostedAt(Record):
    date: Any = None
    relative_time: Any = None


class JobDescription(Record):
    summary: Optional[str] = None
    formatted: Optional[str] = None


class CollectedJob(Record):
    id: Any = None
    title: Optional[str] = None
    company: JobCompany = Field(default_factory=JobCompany)
    location: Optional[str] = None
    country: Optional[str] = None
    url: Optional[str] = None
    posted: PostedAt = Field(default_factory=PostedAt)
    applicants: Any = None
    description: JobDescription = Field(default_factory=JobDescription)
    is_technical: bool = False


# ---------------------------------------------------------------------------
# ScrapingDog: LinkedIn jobs and company profiles
# ---------------------------------------------------------------------------


class JobPostingSummary(Record):
    job_id: Any = None
    job_position: Optional[str] = None
    job_link: Optional[str] = None
    company_name: Optional[str] = None
    company_profile: Optional[str] = None
    job_location: Optional[str] = None
    job_posting_date: Any = None


class JobPostingDetails(Record):
    job_position: Optional[str] = None
    job_location: Optional[str] = None
    company_name: Optional[str] = None
    company_linkedin_id: Any = None
    job_posting_time: Any = None
    job_description: Optional[str] = None
    seniority_level: Optional[str] = None
    employment_type: Optional[str] = None
    job_function: Optional[str] = None
    industries: Any = None


class ProfileUpdate(Record):
    text: Optional[str] = None
    posted_date: Any = None
    likes: Any = None
    title: Optional[str] = None
    link: Optional[str] = None


class CompanyProfile(Record):
    name: Optional[str] = None
    company_id: Any = None
    industry: Any = None
    specialties: Any = None
    founded: Any = None
    company_size: Any = None
    company_size_on_linkedin: Any = Field(default=None, alias="companySizeOnLinkedIn")
    company_type: Any = None
    website: Optional[str] = None
    headquarters: Any = None
    locations: Any = None
    about: Optional[str] = None
    employees: Any = None
    recent_updates: list[ProfileUpdate] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# AnymailFinder
# ---------------------------------------------------------------------------


class EmailResult(Record):
    email: Optional[str] = None
    valid: bool = False
    success: bool = True
    timestamp: str = Field(default_factory=utc_timestamp)


class EmailNotFound(Record):
    message: str = "Email not found"
    timestamp: str = Field(default_factory=utc_timestamp)
