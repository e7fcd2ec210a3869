from __future__ import annotations

import json
from typing import Any

from ..models import Comment, PullRequestRecord, Report, ReviewEvent


def _comment(comment: Comment) -> dict[str, Any]:
    return {
        "author": comment.author,
        "body": comment.body,
        "createdAt": comment.created_at,
        "url": comment.url,
    }


def _review(review: ReviewEvent) -> dict[str, Any]:
    return {
        "author": review.author,
        "state": review.state,
        "submittedAt": review.submitted_at,
        "url": review.url,
    }


def _pull_request(record: PullRequestRecord) -> dict[str, Any]:
    activity = record.recent_activity
    return {
        "number": record.number,
        "title": record.title,
        "repository": record.repository,
        "url": record.url,
        "state": record.state,
        "draft": record.draft,
        "reviewStatus": record.review_status.value,
        "statusChangedInLast24h": record.status_changed_in_last_24h,
        "otfUrl": record.otf_url,
        "createdAt": record.created_at,
        "updatedAt": record.updated_at,
        "daysOpen": record.days_open,
        "recentActivity": {
            "issueComments": [_comment(c) for c in activity.issue_comments],
            "reviewComments": [_comment(c) for c in activity.review_comments],
            "reviews": [_review(r) for r in activity.reviews],
            "totalCount": activity.total_count,
        },
    }


def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "generatedAt": report.generated_at,
        "user": report.user,
        "totalPRs": report.total_prs,
        "pullRequests": [_pull_request(pr) for pr in report.pull_requests],
    }


def format_json(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
