"""Commit-to-pull-request resolution engine.

Key Components:
    - resolve_pull_requests: Concurrent per-commit lookup with failure isolation
    - rank: Deduplicate by PR number and order by recency
    - FilePullRequestPipeline: All stages for one file, ending in a RenderState
    - RefreshSession / refresh: Generation-guarded refreshes for a host shell

Example:
    >>> from file_pr_viewer.engine import FilePullRequestPipeline, RefreshSession, RefreshTrigger
    >>> session = RefreshSession(FilePullRequestPipeline(settings, token_provider))
    >>> state = await session.refresh(RefreshTrigger(Path("src/app.py")))
    >>> [pr.number for pr in state.pull_requests]
    [50, 42]
"""

from file_pr_viewer.engine.pipeline import FilePullRequestPipeline, TokenSource
from file_pr_viewer.engine.ranking import deduplicate, rank
from file_pr_viewer.engine.resolver import resolve_pull_requests
from file_pr_viewer.engine.session import RefreshSession, RefreshTrigger, refresh

__all__ = [
    "FilePullRequestPipeline",
    "RefreshSession",
    "RefreshTrigger",
    "TokenSource",
    "deduplicate",
    "rank",
    "refresh",
    "resolve_pull_requests",
]
