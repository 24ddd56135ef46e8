"""Outbound HTTP for third-party APIs (currently the email provider)."""

from typing import Any, Optional

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0
CONNECT_TIMEOUT_SECONDS = 3.0


class HttpClient:
    """One pooled httpx.AsyncClient per process.

    Created in the app lifespan and closed on shutdown. Transport errors
    propagate to the caller.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT_SECONDS),
            headers={"Accept": "application/json"},
        )

    async def post_json(
        self,
        url: str,
        payload: dict,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        return await self._client.post(url, json=payload, headers=headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
