"""Jinja2 rendering of panel states.

A RenderState is rendered in one of three formats:

    - ``text``: plain text for a terminal
    - ``html``: the panel markup for webview hosts, autoescaped
    - ``json``: a machine-readable dump of the state

Templates live in the package's ``templates/panel`` directory and are
rendered in a sandboxed environment with StrictUndefined, so a missing
context variable fails loudly instead of rendering as an empty string.

Example:
    >>> from file_pr_viewer.rendering import PanelRenderer
    >>> renderer = PanelRenderer()
    >>> print(renderer.render(state, "text"))
    PRs touching this file

    #50 - Add retry to uploads
    https://github.com/acme/widgets/pull/50
    CLOSED | Author: jdoe | Merged: 2024-03-05T09:30:00Z
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Literal, cast

from jinja2 import FileSystemLoader, StrictUndefined, select_autoescape
from jinja2.sandbox import SandboxedEnvironment

from file_pr_viewer.models.domain import PullRequestRecord
from file_pr_viewer.models.state import RenderState, ResolutionStatus

OutputFormat = Literal["text", "html", "json"]
OUTPUT_FORMATS: tuple[str, ...] = ("text", "html", "json")


def github_time(value: datetime | None) -> str | None:
    """Format a timestamp the way the GitHub API does (``2024-03-01T10:00:00Z``)."""
    if value is None:
        return None
    if value.tzinfo is None or value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat()


def _record_to_dict(record: PullRequestRecord) -> dict[str, Any]:
    return {
        "number": record.number,
        "title": record.title,
        "url": record.url,
        "state": record.state.value,
        "author": record.author,
        "merged_at": github_time(record.merged_at),
        "updated_at": github_time(record.updated_at),
    }


def state_to_dict(state: RenderState) -> dict[str, Any]:
    """Convert a RenderState to JSON-serializable primitives."""
    return {
        "status": state.status.value,
        "message": state.display_message,
        "file": str(state.file_path) if state.file_path else None,
        "repository": str(state.repository) if state.repository else None,
        "github_repository": state.identity.full_name if state.identity else None,
        "commits_scanned": state.commits_scanned,
        "failed_lookups": state.failed_lookups,
        "generation": state.generation,
        "pull_requests": [_record_to_dict(pr) for pr in state.pull_requests],
    }


class PanelRenderer:
    """Render RenderState objects with the packaged panel templates.

    Attributes:
        template_dir: Resolved path to the template directory.
        env: The SandboxedEnvironment instance.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the renderer.

        Args:
            template_dir: Directory holding ``panel.txt.j2``, ``panel.html.j2``
                and ``message.html.j2``. Defaults to the packaged templates.

        Raises:
            ValueError: If template_dir doesn't exist or isn't a directory.
        """
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates" / "panel"

        self.template_dir = template_dir.resolve()
        if not self.template_dir.is_dir():
            raise ValueError(f"Template directory does not exist: {self.template_dir}")

        self.env = SandboxedEnvironment(
            loader=FileSystemLoader(str(self.template_dir)),
            undefined=StrictUndefined,
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["github_time"] = github_time

    def _render(self, template_name: str, **context: Any) -> str:
        return cast(str, self.env.get_template(template_name).render(**context))

    def render(self, state: RenderState, output_format: OutputFormat = "text") -> str:
        """Render ``state`` in ``output_format``.

        Raises:
            ValueError: If output_format is not one of text, html or json.
        """
        if output_format == "json":
            return json.dumps(state_to_dict(state), indent=2)
        if output_format == "html":
            return self.render_html(state)
        if output_format == "text":
            return self._render(
                "panel.txt.j2",
                pull_requests=state.pull_requests,
                message=state.display_message or "",
            )
        raise ValueError(f"Unknown output format: {output_format} (expected one of {', '.join(OUTPUT_FORMATS)})")

    def render_html(self, state: RenderState) -> str:
        if state.status is ResolutionStatus.RESOLVED and state.pull_requests:
            return self._render("panel.html.j2", pull_requests=state.pull_requests)
        return self.render_message(state.display_message or "")

    def render_message(self, message: str) -> str:
        """Render a bare message page. The message is HTML-escaped."""
        return self._render("message.html.j2", message=message)

    def render_loading(self) -> str:
        return self.render_message(RenderState.terminal(ResolutionStatus.LOADING).display_message or "")
