"""Configuration for file-pr-viewer.

Key Components:
    - ViewerSettings: Main configuration container with YAML loading support
    - GitHubConfig: API URL, token reference, timeouts and pool size
    - HistoryConfig: Commit window size, remote name and git timeout
    - ResolverConfig: Lookup concurrency

Example:
    >>> from file_pr_viewer.config import ViewerSettings
    >>> settings = ViewerSettings.load("file-prs.yaml")
    >>> settings.history.limit
    25
"""

from file_pr_viewer.config.settings import GitHubConfig, HistoryConfig, ResolverConfig, ViewerSettings

__all__ = ["GitHubConfig", "HistoryConfig", "ResolverConfig", "ViewerSettings"]
