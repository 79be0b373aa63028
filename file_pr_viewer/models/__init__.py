"""Domain models for pull-request resolution.

Key Models:
    - PullRequestRecord: A pull request that touched the file
    - CommitResolution: Outcome slot of one commit lookup
    - RenderState: Terminal result of a refresh

Enums:
    - PullRequestState: open, closed, merged, unknown
    - ResolutionStatus: RESOLVED or one of the terminal error/empty states

Example:
    >>> from file_pr_viewer.models import RenderState, ResolutionStatus
    >>> state = RenderState.terminal(ResolutionStatus.NO_HISTORY)
    >>> state.message
    'No commits found for this file'
"""

from file_pr_viewer.models.domain import CommitResolution, PullRequestRecord, PullRequestState
from file_pr_viewer.models.state import RenderState, ResolutionStatus

__all__ = [
    "CommitResolution",
    "PullRequestRecord",
    "PullRequestState",
    "RenderState",
    "ResolutionStatus",
]
