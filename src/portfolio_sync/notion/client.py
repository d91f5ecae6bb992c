# ABOUTME: Thin async Notion REST client built on httpx with a shared admission gate
# ABOUTME: Every request passes one semaphore so the whole run stays under Notion's rate limit

import asyncio
from typing import Any

import httpx

from portfolio_sync.config import Config, get_config
from portfolio_sync.utils.logging import get_logger, log_api_call
from portfolio_sync.utils.retry import NotionRequestError, convert_response_error, rate_limit_retry


class RequestGate:
    """Admission control for in-flight requests.

    A single gate is shared by every request of a sync run; it caps how many
    requests are outstanding at once rather than pacing individual calls.
    """

    def __init__(self, limit: int = 3):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self.in_flight = 0
        self.peak_in_flight = 0
        self.total_admitted = 0

    async def __aenter__(self) -> "RequestGate":
        await self._semaphore.acquire()
        self.in_flight += 1
        self.total_admitted += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.in_flight -= 1
        self._semaphore.release()


class NotionClient:
    """Async client for the two Notion endpoints the sync needs."""

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        gate: RequestGate | None = None,
        config: Config | None = None,
        retry_min_wait: float = 1.0,
    ):
        self.config = config or get_config()
        self.token = token if token is not None else self.config.notion_token
        self.base_url = self.config.notion_base_url.rstrip("/")
        self.page_size = self.config.page_size
        self.rate_limit_retries = self.config.rate_limit_retries
        self.retry_min_wait = retry_min_wait
        self.gate = gate or RequestGate(self.config.max_concurrent_requests)
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            timeout=self.config.request_timeout,
            trust_env=True,  # honours HTTPS_PROXY / HTTP_PROXY
        )
        self.logger = get_logger(__name__)

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Notion-Version": self.config.notion_version,
            "Content-Type": "application/json",
        }

    async def _send(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with self.gate:
            try:
                response = await self.http_client.request(method, url, headers=self.headers, **kwargs)
            except httpx.HTTPError as e:
                raise NotionRequestError(f"Notion request to {url} failed: {e}") from e

        if response.is_error:
            raise convert_response_error(response)
        return response.json()

    async def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send one request through the gate, backing off only on 429."""
        send = rate_limit_retry(max_attempts=self.rate_limit_retries, min_wait=self.retry_min_wait)(self._send)
        return await send(method, path, **kwargs)

    @log_api_call("notion.databases.query")
    async def query_database(
        self, database_id: str, start_cursor: str | None = None, filter: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Fetch one page of results from a database query."""
        body: dict[str, Any] = {"page_size": self.page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor
        if filter:
            body["filter"] = filter
        return await self.request("POST", f"/databases/{database_id}/query", json=body)

    @log_api_call("notion.blocks.children.list")
    async def list_block_children(self, block_id: str, start_cursor: str | None = None) -> dict[str, Any]:
        """Fetch one page of a block's direct children."""
        params: dict[str, Any] = {"page_size": self.page_size}
        if start_cursor:
            params["start_cursor"] = start_cursor
        return await self.request("GET", f"/blocks/{block_id}/children", params=params)

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
