from __future__ import annotations

from typing import Any

import httpx

from .errors import NetworkError, WebhookError


class SlackWebhook:
    def __init__(self, url: str) -> None:
        self._url = url
        self._client = httpx.Client(timeout=httpx.Timeout(30.0))

    def __enter__(self) -> SlackWebhook:
        return self

    def __exit__(self, *args: Any) -> None:
        self._client.close()

    def post(self, payload: dict[str, Any]) -> None:
        try:
            response = self._client.post(self._url, json=payload)
        except httpx.RequestError as exc:
            raise NetworkError(str(exc)) from exc

        if response.status_code != 200:
            raise WebhookError(f"Slack API returned status {response.status_code}: {response.text}")
