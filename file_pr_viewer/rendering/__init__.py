"""Rendering of resolution results.

Key Exports:
    PanelRenderer: Jinja2 renderer for text, HTML and JSON output.
    state_to_dict: JSON-serializable view of a RenderState.
"""

from file_pr_viewer.rendering.engine import OUTPUT_FORMATS, PanelRenderer, github_time, state_to_dict

__all__ = ["OUTPUT_FORMATS", "PanelRenderer", "github_time", "state_to_dict"]
