"""
Pooled HTTP access to the GitHub REST API.

One pool serves the whole fan-out of a refresh, so the concurrent commit
lookups share TCP connections (and HTTP/2 streams when available). The pool
carries the GitHub request headers, so callers only pass paths.
"""

import asyncio
import time
from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = "file-pr-viewer"
MAX_KEEPALIVE_CONNECTIONS = 10


def github_headers(token: str | None) -> dict[str, str]:
    """Headers for GitHub's versioned JSON API, with a bearer token if given."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": API_VERSION,
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class HTTPConnectionPool:
    """Lazily opened ``httpx.AsyncClient`` bound to one API root.

    Attributes:
        base_url: API root without a trailing slash
        headers: Headers sent with every request
        requests_sent: Number of completed requests, for diagnostics
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        max_connections: int = 25,
        timeout: float = 30.0,
        http2: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_connections = max_connections
        self.max_keepalive_connections = min(max_connections, MAX_KEEPALIVE_CONNECTIONS)
        self.timeout = timeout
        self.headers = github_headers(token)
        self.http2 = http2
        self.requests_sent = 0
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def open(self) -> httpx.AsyncClient:
        """Return the client, creating it on first use."""
        async with self._lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    limits=httpx.Limits(
                        max_connections=self.max_connections,
                        max_keepalive_connections=self.max_keepalive_connections,
                        keepalive_expiry=30.0,
                    ),
                    timeout=self.timeout,
                    http2=self.http2,
                    headers=self.headers,
                    transport=self._transport,
                )
                log.debug("connection_pool_opened", base_url=self.base_url, max_connections=self.max_connections)
            return self._client

    async def close(self) -> None:
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
                log.debug("connection_pool_closed", base_url=self.base_url, requests=self.requests_sent)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """GET ``path`` relative to the API root."""
        client = await self.open()
        started = time.monotonic()
        response = await client.get(path, **kwargs)
        self.requests_sent += 1
        log.debug(
            "github_request",
            path=path,
            status=response.status_code,
            elapsed_ms=round((time.monotonic() - started) * 1000),
        )
        return response

    async def __aenter__(self) -> "HTTPConnectionPool":
        await self.open()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
