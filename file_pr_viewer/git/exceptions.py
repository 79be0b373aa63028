"""Git discovery exceptions.

All exceptions inherit from GitDiscoveryError and carry a hint for
resolution, rendered after the message by ``__str__``.

Example:
    >>> from file_pr_viewer.git.exceptions import InvalidRemoteError
    >>> raise InvalidRemoteError("https://gitlab.com/acme/widgets.git", reason="Not a GitHub host")
    Traceback (most recent call last):
        ...
    InvalidRemoteError: Not a GitHub repository: https://gitlab.com/acme/widgets.git (Not a GitHub host)

    Hint: ...
"""

from file_pr_viewer.exceptions import GitOperationError


class GitDiscoveryError(GitOperationError):
    """Base exception for Git discovery errors.

    Attributes:
        message: Error message
        hint: Optional hint for resolution
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            hint: Optional hint for resolution
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        """Format error message with hint.

        Returns:
            Formatted error message with optional hint
        """
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class NoRemoteError(GitDiscoveryError):
    """Raised when the requested remote is not configured.

    Attributes:
        remote_name: Name of the missing remote
    """

    def __init__(self, remote_name: str) -> None:
        super().__init__(
            message=f"Git remote '{remote_name}' is not configured",
            hint=f"Add it with: git remote add {remote_name} git@github.com:<owner>/<repo>.git",
        )
        self.remote_name = remote_name


class InvalidRemoteError(GitDiscoveryError):
    """Raised when a remote URL does not point at a GitHub repository.

    Attributes:
        url: The rejected URL
        reason: Why it was rejected
    """

    def __init__(self, url: str, reason: str | None = None) -> None:
        msg = f"Not a GitHub repository: {url}"
        if reason:
            msg += f" ({reason})"

        super().__init__(
            message=msg,
            hint=(
                "Expected formats:\n"
                "  - git@github.com:owner/repo.git\n"
                "  - https://github.com/owner/repo.git"
            ),
        )
        self.url = url
        self.reason = reason


class NotGitRepositoryError(GitDiscoveryError):
    """Raised when a path is not inside a Git working tree.

    Attributes:
        path: The path that was checked
    """

    def __init__(self, path: str) -> None:
        super().__init__(
            message=f"Not inside a Git repository: {path}",
            hint="Open a file that belongs to a cloned GitHub repository",
        )
        self.path = path
