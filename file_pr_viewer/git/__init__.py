"""Git repository location, history and remote parsing.

Example:
    >>> from file_pr_viewer.git import GitRepository, locate_repository
    >>> root = await locate_repository("/work/widgets/src/app.py")
    >>> identity = await GitRepository(root).resolve_remote()
    >>> identity.full_name
    'acme/widgets'

Error Handling:
    Discovery exceptions inherit from GitDiscoveryError and include a hint.

    >>> from file_pr_viewer.git import InvalidRemoteError, parse_github_remote
    >>> try:
    ...     parse_github_remote("https://gitlab.com/acme/widgets.git")
    ... except InvalidRemoteError as e:
    ...     print(e.reason)
    Unsupported host gitlab.com
"""

from file_pr_viewer.git.discovery import GitRepository, locate_repository, open_repository
from file_pr_viewer.git.exceptions import (
    GitDiscoveryError,
    InvalidRemoteError,
    NoRemoteError,
    NotGitRepositoryError,
)
from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.git.parser import GitHubRemoteParser, parse_github_remote

__all__ = [
    # Main API
    "GitRepository",
    "locate_repository",
    "open_repository",
    # Parser
    "GitHubRemoteParser",
    "parse_github_remote",
    # Models
    "RemoteIdentity",
    # Exceptions
    "GitDiscoveryError",
    "NotGitRepositoryError",
    "NoRemoteError",
    "InvalidRemoteError",
]
