from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ReviewStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"


@dataclass(frozen=True)
class Comment:
    author: str | None
    body: str
    created_at: str
    url: str


@dataclass(frozen=True)
class ReviewEvent:
    author: str | None
    state: str
    submitted_at: str | None
    url: str
    is_bot: bool = False


@dataclass(frozen=True)
class RecentActivity:
    issue_comments: tuple[Comment, ...] = ()
    review_comments: tuple[Comment, ...] = ()
    reviews: tuple[ReviewEvent, ...] = ()

    @property
    def total_count(self) -> int:
        return len(self.issue_comments) + len(self.review_comments) + len(self.reviews)


@dataclass(frozen=True)
class OpenPull:
    number: int
    title: str
    repository: str
    url: str
    draft: bool
    body: str | None
    author: str | None
    created_at: str
    updated_at: str
    state: str = "open"

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]


@dataclass(frozen=True)
class PullRequestRecord:
    number: int
    title: str
    repository: str
    url: str
    state: str
    draft: bool
    review_status: ReviewStatus
    status_changed_in_last_24h: bool
    otf_url: str | None
    created_at: str
    updated_at: str
    days_open: int
    recent_activity: RecentActivity = field(default_factory=RecentActivity)


@dataclass(frozen=True)
class Report:
    generated_at: str
    user: str
    pull_requests: tuple[PullRequestRecord, ...] = ()

    @property
    def total_prs(self) -> int:
        return len(self.pull_requests)
