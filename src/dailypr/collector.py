from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape

from .activity import (
    classify_review_status,
    days_open,
    detect_otf_url,
    is_recent,
    parse_timestamp,
    status_changed_recently,
)
from .client import GitHubClient
from .errors import ConfigError, DailyPrError
from .models import OpenPull, PullRequestRecord, RecentActivity, Report, ReviewEvent, ReviewStatus

_stderr = Console(stderr=True)

_REVIEW_ICONS = {"APPROVED": "✅", "CHANGES_REQUESTED": "🔄"}


@dataclass(frozen=True)
class RepoScope:
    """Open PRs of one repository, filtered to the target author."""

    owner: str
    name: str
    user: str


@dataclass(frozen=True)
class SearchScope:
    """Open PRs authored by the target user across all accessible repositories."""

    user: str


PullSource = RepoScope | SearchScope


def resolve_source(user: str, repo: str | None) -> PullSource:
    if not repo:
        return SearchScope(user=user)
    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ConfigError(f"{repo!r} is not a valid OWNER/REPO format.")
    return RepoScope(owner=owner, name=name, user=user)


def fetch_candidates(client: GitHubClient, source: PullSource) -> list[OpenPull]:
    if isinstance(source, RepoScope):
        # The pulls listing works on private repositories where search does not.
        pulls = client.list_open_pulls(source.owner, source.name)
        # GitHub logins are case-insensitive.
        user = source.user.casefold()
        return [pr for pr in pulls if pr.author is not None and pr.author.casefold() == user]
    return client.search_open_pulls(source.user)


def build_record(client: GitHubClient, pull: OpenPull, now: datetime) -> PullRequestRecord:
    """Fetch the activity of one PR and derive its record.

    Any error while fetching the activity degrades to an empty activity so
    that one broken PR does not abort the run.
    """
    try:
        issue_comments = client.list_issue_comments(pull.owner, pull.repo, pull.number)
        review_comments = client.list_review_comments(pull.owner, pull.repo, pull.number)
        reviews = client.list_reviews(pull.owner, pull.repo, pull.number)
        activity = RecentActivity(
            issue_comments=tuple(c for c in issue_comments if is_recent(c.created_at, now)),
            review_comments=tuple(c for c in review_comments if is_recent(c.created_at, now)),
            reviews=tuple(r for r in reviews if is_recent(r.submitted_at, now)),
        )
    except (DailyPrError, ValueError) as exc:
        # ValueError: unparseable timestamp
        _stderr.print(f"   [red]Error fetching activity:[/red] {escape(str(exc))}")
        return _record(pull, now, RecentActivity(), classify_review_status(pull.draft, []), False, None)

    otf_url = detect_otf_url([pull.body, *(c.body for c in issue_comments), *(c.body for c in review_comments)])
    return _record(
        pull,
        now,
        activity,
        classify_review_status(pull.draft, reviews),
        status_changed_recently(reviews, now),
        otf_url,
    )


def _record(
    pull: OpenPull,
    now: datetime,
    activity: RecentActivity,
    status: ReviewStatus,
    changed: bool,
    otf_url: str | None,
) -> PullRequestRecord:
    return PullRequestRecord(
        number=pull.number,
        title=pull.title,
        repository=pull.repository,
        url=pull.url,
        state=pull.state,
        draft=pull.draft,
        review_status=status,
        status_changed_in_last_24h=changed,
        otf_url=otf_url,
        created_at=pull.created_at,
        updated_at=pull.updated_at,
        days_open=days_open(pull.created_at, now),
        recent_activity=activity,
    )


def collect_report(
    client: GitHubClient,
    user: str | None = None,
    repo: str | None = None,
    now: datetime | None = None,
    on_record: Callable[[int, PullRequestRecord], None] | None = None,
) -> Report:
    """Build the report of open PRs for ``user`` (or the authenticated caller).

    PRs are processed one at a time, in the order GitHub returned them.
    """
    now = now or datetime.now(tz=timezone.utc)
    if user:
        _stderr.print(f"Using configured user: [bold]{user}[/bold]")
    else:
        user = client.authenticated_login()
        _stderr.print(f"Fetching open PRs for: [bold]{user}[/bold]")

    source = resolve_source(user, repo)
    if isinstance(source, RepoScope):
        _stderr.print(f"Filtering by repo: {source.owner}/{source.name}")

    candidates = fetch_candidates(client, source)
    records: list[PullRequestRecord] = []
    for index, pull in enumerate(candidates, start=1):
        record = build_record(client, pull, now)
        records.append(record)
        if on_record is not None:
            on_record(index, record)

    return Report(
        generated_at=now.isoformat().replace("+00:00", "Z"),
        user=user,
        pull_requests=tuple(records),
    )


def _truncate(text: str, width: int = 80) -> str:
    text = " ".join(text.split())
    return text[:width] + ("..." if len(text) > width else "")


def print_record(index: int, record: PullRequestRecord, console: Console = _stderr) -> None:
    """Print a human readable summary of one PR record."""
    created = parse_timestamp(record.created_at).date().isoformat()
    updated = parse_timestamp(record.updated_at).date().isoformat()
    plural = "" if record.days_open == 1 else "s"

    console.print(f"{index}. [bold]{escape(record.title)}[/bold]", highlight=False)
    console.print(f"   Repository: {record.repository}")
    console.print(f"   URL: {record.url}")
    console.print(f"   Created: {created} ({record.days_open} day{plural} open)")
    console.print(f"   Updated: {updated}")
    console.print(f"   Review status: {record.review_status.value}")
    if record.otf_url:
        console.print(f"   Preview: {record.otf_url}")

    activity = record.recent_activity
    if activity.total_count == 0:
        console.print("   No recent activity in the last 24 hours.\n")
        return

    console.print("   📊 Recent Activity (last 24h):")
    if activity.issue_comments:
        console.print(f"   💬 {len(activity.issue_comments)} new comment(s):")
        for comment in activity.issue_comments:
            console.print(f'      - {comment.author or "ghost"}: "{_truncate(comment.body)}"', markup=False)
    if activity.review_comments:
        console.print(f"   🔍 {len(activity.review_comments)} new review comment(s):")
        for comment in activity.review_comments:
            console.print(f'      - {comment.author or "ghost"}: "{_truncate(comment.body)}"', markup=False)
    if activity.reviews:
        console.print(f"   ✅ {len(activity.reviews)} new review(s):")
        for review in activity.reviews:
            console.print(f"      {_review_icon(review)} {review.author or 'ghost'}: {review.state}", markup=False)
    console.print()


def _review_icon(review: ReviewEvent) -> str:
    return _REVIEW_ICONS.get(review.state, "💭")
