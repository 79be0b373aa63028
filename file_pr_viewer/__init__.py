"""file-pr-viewer: list the GitHub pull requests that touched a file."""

__version__ = "0.1.0"
