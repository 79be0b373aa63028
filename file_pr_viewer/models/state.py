"""Renderable pipeline outcomes.

A refresh always ends in exactly one RenderState. Its status is either
RESOLVED (possibly with an empty list) or one of the terminal states the
presentation layer renders as a message.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.models.domain import PullRequestRecord


class ResolutionStatus(str, Enum):
    """Terminal states of a refresh."""

    LOADING = "loading"
    NO_ACTIVE_FILE = "no_active_file"
    NOT_A_REPOSITORY = "not_a_repository"
    NO_HISTORY = "no_history"
    INVALID_REMOTE = "invalid_remote"
    AUTH_FAILED = "auth_failed"
    ERROR = "error"
    RESOLVED = "resolved"


DEFAULT_MESSAGES: dict[ResolutionStatus, str] = {
    ResolutionStatus.LOADING: "Loading PRs...",
    ResolutionStatus.NO_ACTIVE_FILE: "No active file",
    ResolutionStatus.NOT_A_REPOSITORY: "Not inside a Git repository",
    ResolutionStatus.NO_HISTORY: "No commits found for this file",
    ResolutionStatus.INVALID_REMOTE: "Not a GitHub repository",
    ResolutionStatus.AUTH_FAILED: "GitHub authentication failed",
    ResolutionStatus.ERROR: "Error",
}

NO_PULL_REQUESTS_MESSAGE = "No PRs found for this file"


@dataclass(frozen=True)
class RenderState:
    """Result of one refresh, handed to the presentation layer.

    Attributes:
        status: Terminal status.
        pull_requests: Ranked records; only populated for RESOLVED.
        message: Human-readable detail for non-RESOLVED states.
        file_path: File the refresh was for.
        repository: Repository root, once located.
        identity: GitHub owner/repo, once resolved.
        commits_scanned: Size of the commit window.
        failed_lookups: Commit lookups that failed and were absorbed.
        generation: Refresh generation that produced this state.
    """

    status: ResolutionStatus
    pull_requests: tuple[PullRequestRecord, ...] = field(default_factory=tuple)
    message: str | None = None
    file_path: Path | None = None
    repository: Path | None = None
    identity: RemoteIdentity | None = None
    commits_scanned: int = 0
    failed_lookups: int = 0
    generation: int = 0

    @classmethod
    def terminal(cls, status: ResolutionStatus, detail: str | None = None, **kwargs: object) -> "RenderState":
        """Build a non-RESOLVED state with its default message.

        ``detail`` is appended to the default message after a colon.
        """
        message = DEFAULT_MESSAGES.get(status, status.value)
        if detail:
            message = f"{message}: {detail}"
        return cls(status=status, message=message, **kwargs)  # type: ignore[arg-type]

    @property
    def is_empty(self) -> bool:
        """True for a successful resolution that found no pull requests."""
        return self.status is ResolutionStatus.RESOLVED and not self.pull_requests

    @property
    def display_message(self) -> str | None:
        if self.is_empty:
            return NO_PULL_REQUESTS_MESSAGE
        return self.message

    def with_generation(self, generation: int) -> "RenderState":
        return replace(self, generation=generation)
