"""Pure transformations applied to the activity of a single pull request."""
from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone

from .models import ReviewEvent, ReviewStatus

RECENT_WINDOW = timedelta(hours=24)

APPROVED = "APPROVED"
CHANGES_REQUESTED = "CHANGES_REQUESTED"
_SUBSTANTIVE_STATES = frozenset({APPROVED, CHANGES_REQUESTED})

# The env announcement and its frontend reference sit within a few lines of each other.
_OTF_ANNOUNCEMENT_RE = re.compile(r"bot: Deploy on-the-fly env.{0,500}?playplay/frontend#(\d+)", re.DOTALL)
_OTF_URL_TEMPLATE = "https://fe-{id}-app.playplay.dev/"


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime (UTC if naive)."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_recent(timestamp: str | datetime | None, now: datetime) -> bool:
    """Return True when ``timestamp`` is at or after ``now - 24h``."""
    if not timestamp:
        return False
    return parse_timestamp(timestamp) >= now - RECENT_WINDOW


def days_open(created_at: str | datetime, now: datetime) -> int:
    elapsed = abs(now - parse_timestamp(created_at))
    return max(1, math.ceil(elapsed / timedelta(days=1)))


def classify_review_status(draft: bool, reviews: Sequence[ReviewEvent]) -> ReviewStatus:
    """Derive the review status of a PR from its full review history.

    Only the latest approving or change-requesting review of each human
    reviewer counts. Reviews are expected in submission order; later entries
    override earlier ones from the same reviewer. Comment-only reviews are
    ignored without clearing the reviewer's previous verdict.
    """
    if draft:
        return ReviewStatus.DRAFT
    if not reviews:
        return ReviewStatus.PENDING

    latest: dict[str | None, str] = {}
    for review in reviews:
        if review.is_bot or review.state not in _SUBSTANTIVE_STATES:
            continue
        latest[review.author] = review.state

    states = list(latest.values())
    if CHANGES_REQUESTED in states:
        return ReviewStatus.CHANGES_REQUESTED
    if states and all(state == APPROVED for state in states):
        return ReviewStatus.APPROVED
    return ReviewStatus.PENDING


def status_changed_recently(reviews: Iterable[ReviewEvent], now: datetime) -> bool:
    return any(
        not review.is_bot and review.state in _SUBSTANTIVE_STATES and is_recent(review.submitted_at, now)
        for review in reviews
    )


def detect_otf_url(texts: Iterable[str | None]) -> str | None:
    """Return the preview environment URL announced in the first matching text."""
    for text in texts:
        if not text:
            continue
        if match := _OTF_ANNOUNCEMENT_RE.search(text):
            return _OTF_URL_TEMPLATE.format(id=match.group(1))
    return None
