"""
Refresh sessions.

A host shell (the CLI, an editor integration) owns one RefreshSession per
panel. Every refresh takes a new generation number; a finished refresh is
applied only if no newer refresh has started since, so a slow result for a
previous file never overwrites the current one.
"""

import asyncio
import contextlib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from file_pr_viewer.engine.pipeline import FilePullRequestPipeline
from file_pr_viewer.models.state import RenderState, ResolutionStatus

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RefreshTrigger:
    """Why and for which file a refresh was requested."""

    file_path: Path | None
    reason: str = "manual"
    """One of ``manual``, ``active_file_changed`` or ``file_saved``."""


class RefreshSession:
    """Holds the latest applied RenderState and the refresh generation.

    Args:
        pipeline: Pipeline run by each refresh
        on_render: Called with every applied state, including loading states
    """

    def __init__(
        self,
        pipeline: FilePullRequestPipeline,
        on_render: Callable[[RenderState], None] | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.on_render = on_render
        self._generation = 0
        self._latest = RenderState.terminal(ResolutionStatus.NO_ACTIVE_FILE)
        self._task: asyncio.Task[RenderState] | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def latest(self) -> RenderState:
        """Most recently applied state."""
        return self._latest

    def begin(self) -> int:
        """Start a new refresh and return its generation."""
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def apply(self, state: RenderState) -> bool:
        """Store ``state`` if it belongs to the latest generation.

        Returns:
            True if the state was applied, False if it was stale.
        """
        if not self.is_current(state.generation):
            log.debug("stale_state_discarded", generation=state.generation, current=self._generation)
            return False

        self._latest = state
        if self.on_render is not None:
            self.on_render(state)
        return True

    def refresh(self, trigger: RefreshTrigger) -> "asyncio.Task[RenderState]":
        """Schedule a refresh, cancelling the one still in flight.

        Must be called from a running event loop. Awaiting the returned task
        raises CancelledError if a later refresh supersedes it.
        """
        if self._task is not None and not self._task.done():
            log.debug("refresh_superseded", generation=self._generation)
            self._task.cancel()
        self._task = asyncio.create_task(refresh(self, trigger))
        return self._task

    async def close(self) -> None:
        """Cancel and wait for the in-flight refresh, if any."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


async def refresh(session: RefreshSession, trigger: RefreshTrigger) -> RenderState:
    """Run one refresh for ``trigger`` against ``session``.

    Applies a loading state first, then the pipeline result. Both are
    tagged with this refresh's generation and dropped by the session if a
    newer refresh has begun in the meantime.

    Returns:
        The state produced by the pipeline, whether or not it was applied.
    """
    generation = session.begin()
    file_path = trigger.file_path

    with structlog.contextvars.bound_contextvars(
        generation=generation,
        file=str(file_path) if file_path is not None else None,
    ):
        log.info("refresh_started", reason=trigger.reason)
        session.apply(RenderState.terminal(ResolutionStatus.LOADING, file_path=file_path, generation=generation))

        state = (await session.pipeline.run(file_path)).with_generation(generation)
        applied = session.apply(state)

        log.info(
            "refresh_finished",
            status=state.status.value,
            pull_requests=len(state.pull_requests),
            applied=applied,
        )
    return state
