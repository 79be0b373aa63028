"""
Concurrent commit-to-pull-request resolution.

Every commit of the window is looked up independently. Lookups run
concurrently, optionally bounded by a semaphore, and a failure in one
lookup never affects the others: it resolves to an empty slot. The result
always has exactly one slot per commit, in window order.
"""

import asyncio
from collections.abc import Sequence

import structlog

from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.models.domain import CommitResolution
from file_pr_viewer.providers.base import PullRequestProvider

log = structlog.get_logger(__name__)


async def resolve_pull_requests(
    provider: PullRequestProvider,
    identity: RemoteIdentity,
    window: Sequence[str],
    max_concurrency: int | None = None,
) -> list[CommitResolution]:
    """Resolve each commit of the window to at most one pull request.

    Args:
        provider: Connected pull request provider
        identity: Repository the commits belong to
        window: Commit ids, most recent first
        max_concurrency: Upper bound on in-flight lookups (None means all
            lookups start at once)

    Returns:
        One CommitResolution per commit, in the same order as ``window``.

    Raises:
        ValueError: If max_concurrency is smaller than 1.
    """
    if max_concurrency is not None and max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1 (got {max_concurrency})")

    if not window:
        return []

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def _lookup(sha: str) -> CommitResolution:
        try:
            if semaphore is None:
                records = await provider.list_pulls_for_commit(identity, sha)
            else:
                async with semaphore:
                    records = await provider.list_pulls_for_commit(identity, sha)
        except Exception as e:
            log.warning(
                "commit_lookup_failed",
                sha=sha[:12],
                error=str(e),
                error_type=type(e).__name__,
            )
            return CommitResolution(sha=sha, failed=True)

        # The service may associate several PRs with one commit; keep the first.
        return CommitResolution(sha=sha, pull_request=records[0] if records else None)

    log.debug("resolving_commits", count=len(window), max_concurrency=max_concurrency)
    outcomes = await asyncio.gather(*(_lookup(sha) for sha in window), return_exceptions=True)

    resolutions: list[CommitResolution] = []
    for outcome in outcomes:
        # Exceptions are absorbed inside _lookup; anything left is cancellation or an interrupt
        if isinstance(outcome, BaseException):
            raise outcome
        resolutions.append(outcome)

    failed = sum(1 for r in resolutions if r.failed)
    if failed:
        log.info("commit_lookups_degraded", failed=failed, total=len(window))

    return resolutions
