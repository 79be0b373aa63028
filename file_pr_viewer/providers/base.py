"""
Abstract base class for hosting providers.

The resolution pipeline only needs one capability from the hosting service:
"which pull requests contain this commit". Keeping it behind an interface
lets the resolver be exercised with in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Any

from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.models.domain import PullRequestRecord


class PullRequestProvider(ABC):
    """Lookup of pull requests associated with a commit.

    Implementations are async context managers; ``connect`` must be awaited
    (directly or through ``async with``) before issuing lookups.
    """

    async def connect(self) -> None:  # noqa: B027
        """Acquire network resources. No-op by default."""

    async def disconnect(self) -> None:  # noqa: B027
        """Release network resources. No-op by default."""

    async def __aenter__(self) -> "PullRequestProvider":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.disconnect()

    @abstractmethod
    async def list_pulls_for_commit(self, identity: RemoteIdentity, sha: str) -> list[PullRequestRecord]:
        """List pull requests associated with a commit.

        Args:
            identity: Repository the commit belongs to.
            sha: Full commit id.

        Returns:
            Associated pull requests in the order the service returns them.
            Empty when the commit is not part of any pull request.

        Raises:
            GitHubAPIError: If the service rejects the request or returns an
                unusable payload.
            httpx.HTTPError: On transport failures.
        """
        pass
