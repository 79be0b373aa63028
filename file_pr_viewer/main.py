"""CLI entry point for file-pr-viewer."""

import asyncio
import contextlib
import sys
import threading
from pathlib import Path
from typing import TextIO

import click
import structlog

from file_pr_viewer.cli.credentials import credentials_group
from file_pr_viewer.config.settings import ViewerSettings
from file_pr_viewer.credentials import GitHubTokenProvider
from file_pr_viewer.engine.pipeline import FilePullRequestPipeline
from file_pr_viewer.engine.session import RefreshSession, RefreshTrigger, refresh
from file_pr_viewer.exceptions import ConfigurationError, FilePrViewerError
from file_pr_viewer.models.state import RenderState, ResolutionStatus
from file_pr_viewer.rendering import OUTPUT_FORMATS, PanelRenderer
from file_pr_viewer.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)

SUCCESS_STATUSES = frozenset({ResolutionStatus.RESOLVED, ResolutionStatus.NO_HISTORY})


@click.group()
@click.option(
    "--config",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: .file-prs.yaml, then ~/.config/file-prs/config.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging level (overrides the config file)",
)
@click.option("--log-json", is_flag=True, help="Write logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, log_level: str | None, log_json: bool) -> None:
    """file-prs: list the GitHub pull requests that touched a file."""
    try:
        settings = ViewerSettings.load(config)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    configure_logging(log_level or settings.log_level, json_output=log_json or settings.log_json)
    ctx.obj = {"settings": settings}


cli.add_command(credentials_group)


def _apply_overrides(settings: ViewerSettings, limit: int | None, remote: str | None) -> ViewerSettings:
    history_updates: dict[str, object] = {}
    if limit is not None:
        history_updates["limit"] = limit
    if remote:
        history_updates["remote_name"] = remote
    if not history_updates:
        return settings
    return settings.model_copy(update={"history": settings.history.model_copy(update=history_updates)})


def _build_pipeline(settings: ViewerSettings, interactive: bool) -> FilePullRequestPipeline:
    token_provider = GitHubTokenProvider(
        token_reference=settings.github.token,
        interactive=interactive,
    )
    return FilePullRequestPipeline(settings, token_provider)


@cli.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.option("--limit", type=click.IntRange(1, 100), default=None, help="Commits to scan (default: 25)")
@click.option("--remote", default=None, help="Remote naming the GitHub repository (default: origin)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Output format",
)
@click.option("--no-prompt", is_flag=True, help="Never prompt for a GitHub token")
@click.pass_context
def show(
    ctx: click.Context,
    file: Path,
    limit: int | None,
    remote: str | None,
    output_format: str,
    no_prompt: bool,
) -> None:
    """Show the pull requests that touched FILE, most recent first.

    Exits with status 0 when the lookup completed (including files with no
    history) and 1 for every other outcome.
    """
    settings = _apply_overrides(ctx.obj["settings"], limit, remote)

    try:
        state = asyncio.run(_show(settings, file, interactive=not no_prompt))
        click.echo(PanelRenderer().render(state, output_format))  # type: ignore[arg-type]
    except FilePrViewerError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("show_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    if state.status not in SUCCESS_STATUSES:
        sys.exit(1)


async def _show(settings: ViewerSettings, file: Path, interactive: bool) -> RenderState:
    """Run a single refresh for ``file``."""
    session = RefreshSession(_build_pipeline(settings, interactive))
    return await refresh(session, RefreshTrigger(file, reason="manual"))


@cli.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Output format",
)
@click.pass_context
def watch(ctx: click.Context, output_format: str) -> None:
    """Follow the active file named on each line of standard input.

    Every line starts a refresh for that path and supersedes the previous
    one; an empty line clears the active file. Only results that are still
    current when they finish are printed.
    """
    try:
        asyncio.run(_watch(ctx.obj["settings"], output_format))
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)


def _start_line_reader(stream: TextIO, queue: asyncio.Queue[str]) -> threading.Thread:
    """Feed lines of ``stream`` into ``queue`` from a daemon thread, then "" at EOF.

    A blocked read must not keep the interpreter alive after Ctrl-C.
    """
    loop = asyncio.get_running_loop()

    def read() -> None:
        for line in iter(stream.readline, ""):
            loop.call_soon_threadsafe(queue.put_nowait, line)
        loop.call_soon_threadsafe(queue.put_nowait, "")

    reader = threading.Thread(target=read, name="stdin-reader", daemon=True)
    reader.start()
    return reader


async def _watch(settings: ViewerSettings, output_format: str) -> None:
    renderer = PanelRenderer()

    def on_render(state: RenderState) -> None:
        if state.status is not ResolutionStatus.LOADING:
            click.echo(renderer.render(state, output_format))  # type: ignore[arg-type]

    # stdin carries the file names, so the token can never be prompted for
    session = RefreshSession(_build_pipeline(settings, interactive=False), on_render=on_render)
    last: asyncio.Task[RenderState] | None = None
    lines: asyncio.Queue[str] = asyncio.Queue()
    _start_line_reader(sys.stdin, lines)
    try:
        while True:
            line = await lines.get()
            if not line:
                break
            path = line.strip()
            last = session.refresh(RefreshTrigger(Path(path) if path else None, reason="active_file_changed"))

        if last is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await last
    finally:
        await session.close()


if __name__ == "__main__":
    cli()
