"""
Domain models for pull-request resolution.

These are the normalized internal representation of what the GitHub API
returns, built at the API boundary and consumed by the ranker and the
renderers. Every instance is created fresh per refresh and never persisted.

Example:
    Building a record and reading its recency key::

        record = PullRequestRecord(
            number=42,
            title="Fix login redirect",
            url="https://github.com/acme/widgets/pull/42",
            state=PullRequestState.CLOSED,
            author="jdoe",
            merged_at=datetime(2024, 3, 1, tzinfo=UTC),
            updated_at=datetime(2024, 3, 2, tzinfo=UTC),
        )
        record.recency_key  # merged_at wins over updated_at
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PullRequestState(str, Enum):
    """Pull request state as reported by the API.

    GitHub only reports ``open`` and ``closed``; a merged PR is ``closed``
    with ``merged_at`` set. MERGED exists for payloads that say so
    explicitly. Anything unrecognized becomes UNKNOWN.
    """

    OPEN = "open"
    """Pull request is open."""

    CLOSED = "closed"
    """Pull request is closed, merged or not."""

    MERGED = "merged"
    """Explicitly reported as merged."""

    UNKNOWN = "unknown"
    """State missing or not recognized."""

    @classmethod
    def parse(cls, value: object) -> "PullRequestState":
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        """Upper-case display label, e.g. ``CLOSED``."""
        return self.value.upper()


@dataclass(frozen=True)
class PullRequestRecord:
    """A pull request associated with at least one commit of the file.

    ``number`` uniquely identifies a record within one resolution result.
    Optional fields are None when the API omitted them.
    """

    number: int
    """Repository-scoped PR number."""

    title: str
    """PR title."""

    url: str
    """Browser URL of the PR (``html_url``)."""

    state: PullRequestState = PullRequestState.UNKNOWN
    """Reported state."""

    author: str | None = None
    """Login of the PR author, when known."""

    merged_at: datetime | None = None
    """Merge time, None if never merged."""

    updated_at: datetime | None = None
    """Last update time."""

    @property
    def recency_key(self) -> datetime | None:
        """Timestamp used for ranking: merge time if merged, else last update."""
        if self.merged_at is not None:
            return self.merged_at
        return self.updated_at


@dataclass(frozen=True)
class CommitResolution:
    """Outcome slot of one commit lookup.

    ``pull_request`` is None when the commit has no associated PR or the
    lookup failed; ``failed`` tells the two apart for diagnostics only.
    """

    sha: str
    pull_request: PullRequestRecord | None = None
    failed: bool = False
