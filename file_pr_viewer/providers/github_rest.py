"""GitHub provider implementation using direct REST API calls."""

from datetime import datetime
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from file_pr_viewer.exceptions import AuthenticationError, GitHubAPIError, GitHubServerError, RateLimitError
from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.models.domain import PullRequestRecord, PullRequestState
from file_pr_viewer.providers.base import PullRequestProvider
from file_pr_viewer.utils.connection_pool import HTTPConnectionPool
from file_pr_viewer.utils.retry import async_retry

log = structlog.get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp, mapping anything unusable to None."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


class GitHubUserPayload(BaseModel):
    """The ``user`` object of a pull request payload."""

    model_config = ConfigDict(extra="ignore")

    login: str | None = None


class GitHubPullPayload(BaseModel):
    """One entry of ``GET /repos/{owner}/{repo}/commits/{sha}/pulls``.

    Only ``number`` is required. Missing or malformed optional fields become
    None instead of failing the whole entry.
    """

    model_config = ConfigDict(extra="ignore")

    number: int
    title: str = ""
    html_url: str | None = None
    state: str | None = None
    user: GitHubUserPayload | None = None
    merged_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("merged_at", "updated_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v: Any) -> datetime | None:
        return _parse_timestamp(v)

    @field_validator("title", mode="before")
    @classmethod
    def none_title(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("user", mode="before")
    @classmethod
    def ignore_malformed_user(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    def to_record(self, identity: RemoteIdentity) -> PullRequestRecord:
        """Convert to the domain record, filling a URL if the API omitted one."""
        url = self.html_url or f"https://github.com/{identity.full_name}/pull/{self.number}"
        return PullRequestRecord(
            number=self.number,
            title=self.title,
            url=url,
            state=PullRequestState.parse(self.state),
            author=self.user.login if self.user and self.user.login else None,
            merged_at=self.merged_at,
            updated_at=self.updated_at,
        )


class GitHubRestClient(PullRequestProvider):
    """GitHub implementation of the commit-to-pull-request lookup."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        max_connections: int = 25,
        retry_attempts: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub token sent as a bearer credential
            api_url: REST API root (GitHub Enterprise uses https://host/api/v3)
            timeout: Per-request timeout in seconds
            max_connections: Connection pool size; the fan-out never needs
                more than the commit window length
            retry_attempts: Total attempts per request on transport errors
                (1 disables retrying)
            transport: Optional custom httpx transport
        """
        self.token = token.strip() if token else token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_connections = max_connections
        self.retry_attempts = retry_attempts
        self._transport = transport
        self._pool: HTTPConnectionPool | None = None
        self._get = async_retry(
            max_attempts=retry_attempts,
            exceptions=(httpx.TransportError, GitHubServerError),
        )(self._get_once)

    async def connect(self) -> None:
        """Initialize the connection pool."""
        if self._pool is not None:
            return
        self._pool = HTTPConnectionPool(
            base_url=self.api_url,
            token=self.token,
            max_connections=self.max_connections,
            timeout=self.timeout,
            transport=self._transport,
        )
        await self._pool.open()
        log.debug("github_connected", api_url=self.api_url)

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def _get_once(self, path: str) -> httpx.Response:
        if self._pool is None:
            raise ConnectionError("GitHub client is not connected")
        response = await self._pool.get(path)
        if response.status_code >= 500:
            self._raise_for_status(response)
        return response

    async def list_pulls_for_commit(self, identity: RemoteIdentity, sha: str) -> list[PullRequestRecord]:
        """List pull requests associated with a commit."""
        path = f"/repos/{identity.owner}/{identity.repo}/commits/{sha}/pulls"
        response = await self._get(path)
        self._raise_for_status(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise GitHubAPIError(
                "Malformed JSON from commit pulls endpoint",
                status_code=response.status_code,
                response_text=response.text[:200],
            ) from e

        if not isinstance(payload, list):
            raise GitHubAPIError(
                "Unexpected payload from commit pulls endpoint: expected a list",
                status_code=response.status_code,
            )

        records: list[PullRequestRecord] = []
        for entry in payload:
            try:
                records.append(GitHubPullPayload.model_validate(entry).to_record(identity))
            except ValidationError as e:
                log.warning("github_pull_entry_invalid", sha=sha, errors=e.error_count())

        log.debug("github_commit_pulls", sha=sha, count=len(records))
        return records

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Map error responses to the GitHubAPIError hierarchy."""
        if response.is_success:
            return

        status = response.status_code
        text = response.text[:200]
        message = f"GitHub API request failed: {response.request.method} {response.request.url.path}"

        if status == 401:
            raise AuthenticationError("GitHub rejected the token", status_code=status, response_text=text)

        remaining = response.headers.get("x-ratelimit-remaining")
        if status == 429 or (status == 403 and remaining == "0"):
            reset = response.headers.get("x-ratelimit-reset")
            raise RateLimitError(
                "GitHub API rate limit exceeded",
                status_code=status,
                response_text=text,
                reset_at=int(reset) if reset and reset.isdigit() else None,
            )

        if status >= 500:
            raise GitHubServerError(message, status_code=status, response_text=text)

        raise GitHubAPIError(message, status_code=status, response_text=text)
