"""Shared factories and fixtures for the test suite."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from dailypr.models import (
    Comment,
    OpenPull,
    PullRequestRecord,
    RecentActivity,
    Report,
    ReviewEvent,
    ReviewStatus,
)

NOW = datetime(2024, 6, 10, 12, 0, 0, tzinfo=timezone.utc)
RECENT = "2024-06-10T08:00:00Z"
OLD = "2024-06-01T08:00:00Z"

# ---------------------------------------------------------------------------
# REST node factories: return raw dicts that mirror API responses
# ---------------------------------------------------------------------------


def user_node(login: str | None = "reviewer", type: str = "User") -> dict | None:
    if login is None:
        return None
    return {"login": login, "type": type}


def pull_node(
    number: int = 1,
    title: str = "Fix bug",
    author: str | None = "alice",
    full_name: str = "owner/repo",
    draft: bool = False,
    body: str | None = "Fixes the bug",
    created_at: str = "2024-06-08T12:00:00Z",
    updated_at: str = "2024-06-10T09:00:00Z",
) -> dict:
    return {
        "number": number,
        "title": title,
        "state": "open",
        "draft": draft,
        "body": body,
        "html_url": f"https://github.com/{full_name}/pull/{number}",
        "user": user_node(author),
        "created_at": created_at,
        "updated_at": updated_at,
        "base": {"repo": {"full_name": full_name}},
    }


def search_item_node(
    number: int = 1,
    title: str = "Fix bug",
    author: str | None = "alice",
    full_name: str = "owner/repo",
    draft: bool = False,
    body: str | None = "Fixes the bug",
    created_at: str = "2024-06-08T12:00:00Z",
    updated_at: str = "2024-06-10T09:00:00Z",
) -> dict:
    return {
        "number": number,
        "title": title,
        "state": "open",
        "draft": draft,
        "body": body,
        "html_url": f"https://github.com/{full_name}/pull/{number}",
        "repository_url": f"https://api.github.com/repos/{full_name}",
        "user": user_node(author),
        "created_at": created_at,
        "updated_at": updated_at,
        "pull_request": {"url": f"https://api.github.com/repos/{full_name}/pulls/{number}"},
    }


def comment_node(
    author: str | None = "reviewer",
    body: str = "Looks good",
    created_at: str = RECENT,
    url: str = "https://github.com/owner/repo/pull/1#issuecomment-1",
) -> dict:
    return {
        "user": user_node(author),
        "body": body,
        "created_at": created_at,
        "html_url": url,
    }


def review_node(
    author: str | None = "reviewer",
    state: str = "APPROVED",
    submitted_at: str | None = RECENT,
    user_type: str = "User",
    url: str = "https://github.com/owner/repo/pull/1#pullrequestreview-1",
) -> dict:
    return {
        "user": user_node(author, type=user_type),
        "state": state,
        "submitted_at": submitted_at,
        "html_url": url,
    }


# ---------------------------------------------------------------------------
# Model object factories: construct typed model instances
# ---------------------------------------------------------------------------


def make_comment(
    author: str | None = "reviewer",
    body: str = "Looks good",
    created_at: str = RECENT,
    url: str = "https://github.com/owner/repo/pull/1#issuecomment-1",
) -> Comment:
    return Comment(author=author, body=body, created_at=created_at, url=url)


def make_review(
    author: str | None = "reviewer",
    state: str = "APPROVED",
    submitted_at: str | None = RECENT,
    is_bot: bool = False,
    url: str = "https://github.com/owner/repo/pull/1#pullrequestreview-1",
) -> ReviewEvent:
    return ReviewEvent(author=author, state=state, submitted_at=submitted_at, url=url, is_bot=is_bot)


def make_open_pull(
    number: int = 1,
    title: str = "Fix bug",
    repository: str = "owner/repo",
    draft: bool = False,
    body: str | None = "Fixes the bug",
    author: str | None = "alice",
    created_at: str = "2024-06-08T12:00:00Z",
    updated_at: str = "2024-06-10T09:00:00Z",
) -> OpenPull:
    return OpenPull(
        number=number,
        title=title,
        repository=repository,
        url=f"https://github.com/{repository}/pull/{number}",
        draft=draft,
        body=body,
        author=author,
        created_at=created_at,
        updated_at=updated_at,
    )


def make_record(
    number: int = 1,
    title: str = "Fix bug",
    repository: str = "owner/repo",
    draft: bool = False,
    review_status: ReviewStatus = ReviewStatus.PENDING,
    status_changed_in_last_24h: bool = False,
    otf_url: str | None = None,
    days_open: int = 2,
    activity: RecentActivity | None = None,
) -> PullRequestRecord:
    return PullRequestRecord(
        number=number,
        title=title,
        repository=repository,
        url=f"https://github.com/{repository}/pull/{number}",
        state="open",
        draft=draft,
        review_status=review_status,
        status_changed_in_last_24h=status_changed_in_last_24h,
        otf_url=otf_url,
        created_at="2024-06-08T12:00:00Z",
        updated_at="2024-06-10T09:00:00Z",
        days_open=days_open,
        recent_activity=activity or RecentActivity(),
    )


def make_report(records: list[PullRequestRecord] | None = None, user: str = "alice") -> Report:
    return Report(generated_at="2024-06-10T12:00:00Z", user=user, pull_requests=tuple(records or []))


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_dotenv(mocker):
    """Prevent tests from loading a real .env file."""
    mocker.patch("dailypr.cli.load_dotenv")
