"""Slack delivery through an incoming-webhook URL."""

from __future__ import annotations

import httpx

_TIMEOUT = 10.0


class SlackWebhookChannel:
    name = "slack"

    def __init__(self, webhook_url: str, client: httpx.AsyncClient | None = None) -> None:
        self._url = webhook_url
        self._client = client

    async def send(self, text: str) -> None:
        if self._client is not None:
            resp = await self._client.post(self._url, json={"text": text})
            resp.raise_for_status()
            return
        async with httpx.AsyncClient(timeout=_TIMEOUT) as client:
            resp = await client.post(self._url, json={"text": text})
            resp.raise_for_status()
