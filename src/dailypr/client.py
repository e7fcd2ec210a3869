from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from rich.console import Console

from .errors import ApiError, AuthError, NetworkError, NotFoundError, RateLimitError
from .models import Comment, OpenPull, ReviewEvent

_API_URL = "https://api.github.com"
_PER_PAGE = 100
_stderr = Console(stderr=True)

T = TypeVar("T")


class GitHubClient:
    def __init__(self, token: str, base_url: str = _API_URL) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(30.0),
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self._client.close()

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = self._client.get(path, params=params)
        except httpx.RequestError as exc:
            raise NetworkError(str(exc)) from exc

        remaining = response.headers.get("X-RateLimit-Remaining")
        reset_at = response.headers.get("X-RateLimit-Reset", "unknown")

        if response.status_code == 401:
            raise AuthError("GitHub token is invalid or missing required scopes. Please check your GH_PAT.")
        if response.status_code in (403, 429) and remaining == "0":
            raise RateLimitError(f"GitHub rate limit exhausted. Resets at {reset_at}.")
        if response.status_code == 404:
            raise NotFoundError(f"GitHub resource not found: {path}")
        if response.status_code != 200:
            raise ApiError(f"GitHub API returned HTTP {response.status_code}: {response.text}")

        if remaining is not None and remaining.isdigit() and int(remaining) < 100:
            _stderr.print(
                f"[yellow]Warning:[/yellow] GitHub rate limit low: {remaining} requests remaining "
                f"(resets at {reset_at})"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned a non-JSON body for {path}") from exc

    def authenticated_login(self) -> str:
        data = self.get("/user")
        return self._parse("/user", lambda: data["login"])

    def list_open_pulls(self, owner: str, repo: str) -> list[OpenPull]:
        path = f"/repos/{owner}/{repo}/pulls"
        items = self.get(path, {"state": "open", "per_page": _PER_PAGE})
        return self._parse(path, lambda: [self._parse_pull(item) for item in items])

    def search_open_pulls(self, user: str) -> list[OpenPull]:
        data = self.get(
            "/search/issues",
            {
                "q": f"is:pr is:open author:{user}",
                "sort": "updated",
                "order": "desc",
                "per_page": _PER_PAGE,
            },
        )
        return self._parse("/search/issues", lambda: [self._parse_search_item(item) for item in data.get("items", [])])

    def list_issue_comments(self, owner: str, repo: str, number: int) -> list[Comment]:
        path = f"/repos/{owner}/{repo}/issues/{number}/comments"
        items = self.get(path, {"per_page": _PER_PAGE})
        return self._parse(path, lambda: [self._parse_comment(item) for item in items])

    def list_review_comments(self, owner: str, repo: str, number: int) -> list[Comment]:
        path = f"/repos/{owner}/{repo}/pulls/{number}/comments"
        items = self.get(path, {"per_page": _PER_PAGE})
        return self._parse(path, lambda: [self._parse_comment(item) for item in items])

    def list_reviews(self, owner: str, repo: str, number: int) -> list[ReviewEvent]:
        path = f"/repos/{owner}/{repo}/pulls/{number}/reviews"
        items = self.get(path, {"per_page": _PER_PAGE})
        return self._parse(path, lambda: [self._parse_review(item) for item in items])

    @staticmethod
    def _parse(path: str, parse: Callable[[], T]) -> T:
        try:
            return parse()
        except (KeyError, TypeError, AttributeError) as exc:
            raise ApiError(f"Unexpected GitHub API response for {path}: {exc!r}") from exc

    @staticmethod
    def _login(node: dict[str, Any]) -> str | None:
        user = node.get("user")
        return user["login"] if user else None

    @staticmethod
    def _parse_pull(node: dict[str, Any]) -> OpenPull:
        return OpenPull(
            number=node["number"],
            title=node["title"],
            repository=node["base"]["repo"]["full_name"],
            url=node["html_url"],
            draft=bool(node.get("draft", False)),
            body=node.get("body"),
            author=GitHubClient._login(node),
            created_at=node["created_at"],
            updated_at=node["updated_at"],
            state=node.get("state", "open"),
        )

    @staticmethod
    def _parse_search_item(node: dict[str, Any]) -> OpenPull:
        # repository_url is https://api.github.com/repos/{owner}/{repo}
        repository = "/".join(node["repository_url"].rstrip("/").split("/")[-2:])
        return OpenPull(
            number=node["number"],
            title=node["title"],
            repository=repository,
            url=node["html_url"],
            draft=bool(node.get("draft", False)),
            body=node.get("body"),
            author=GitHubClient._login(node),
            created_at=node["created_at"],
            updated_at=node["updated_at"],
            state=node.get("state", "open"),
        )

    @staticmethod
    def _parse_comment(node: dict[str, Any]) -> Comment:
        return Comment(
            author=GitHubClient._login(node),
            body=node.get("body") or "",
            created_at=node["created_at"],
            url=node["html_url"],
        )

    @staticmethod
    def _parse_review(node: dict[str, Any]) -> ReviewEvent:
        user = node.get("user") or {}
        login = user.get("login")
        return ReviewEvent(
            author=login,
            state=node["state"],
            submitted_at=node.get("submitted_at"),
            url=node["html_url"],
            is_bot=user.get("type") == "Bot" or bool(login and login.endswith("[bot]")),
        )
