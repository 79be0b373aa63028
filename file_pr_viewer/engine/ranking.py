"""Deduplication and recency ranking of resolved pull requests."""

from collections.abc import Iterable
from datetime import UTC

from file_pr_viewer.models.domain import CommitResolution, PullRequestRecord


def _sort_key(record: PullRequestRecord) -> tuple[int, float]:
    key = record.recency_key
    if key is None:
        return (0, 0.0)
    if key.tzinfo is None:
        key = key.replace(tzinfo=UTC)
    return (1, key.timestamp())


def deduplicate(resolutions: Iterable[CommitResolution | PullRequestRecord | None]) -> list[PullRequestRecord]:
    """Drop empty slots and keep the first occurrence of each PR number."""
    seen: set[int] = set()
    unique: list[PullRequestRecord] = []
    for item in resolutions:
        record = item.pull_request if isinstance(item, CommitResolution) else item
        if record is None or record.number in seen:
            continue
        seen.add(record.number)
        unique.append(record)
    return unique


def rank(resolutions: Iterable[CommitResolution | PullRequestRecord | None]) -> tuple[PullRequestRecord, ...]:
    """Deduplicate and order pull requests, most recent first.

    Records are ordered by ``merged_at`` falling back to ``updated_at``,
    descending. Records with neither timestamp go last. Ties keep the order
    in which they were first seen, which is commit order.

    Args:
        resolutions: Lookup slots in commit order; bare records and None
            are accepted as well

    Returns:
        Ranked, duplicate-free records.
    """
    unique = deduplicate(resolutions)
    # sorted() stays stable with reverse=True
    return tuple(sorted(unique, key=_sort_key, reverse=True))


__all__ = ["deduplicate", "rank"]
