"""Custom exception hierarchy for file-pr-viewer.

This module defines the exceptions raised inside the resolution pipeline.
None of them cross the pipeline boundary: ``FilePullRequestPipeline.run``
converts every failure into a terminal ``ResolutionStatus`` so the
presentation layer always receives a renderable state.

Exception Hierarchy:
    FilePrViewerError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── CredentialNotFoundError
    │   ├── CredentialFormatError
    │   ├── BackendNotAvailableError
    │   └── AuthDeniedError
    ├── GitOperationError
    │   ├── GitCommandError
    │   └── GitDiscoveryError (see file_pr_viewer.git.exceptions)
    └── ExternalServiceError
        └── GitHubAPIError
            ├── AuthenticationError
            ├── RateLimitError
            └── GitHubServerError

Example Usage:
    >>> from file_pr_viewer.exceptions import ConfigurationError
    >>> try:
    ...     settings = ViewerSettings.from_yaml(path)
    ... except FileNotFoundError as e:
    ...     raise ConfigurationError(f"Config file not found: {path}") from e
"""


class FilePrViewerError(Exception):
    """Base exception for all file-pr-viewer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(FilePrViewerError):
    """Configuration-related errors.

    Examples:
        - Configuration file not found
        - Invalid YAML syntax
        - Invalid configuration values
    """

    pass


class CredentialError(FilePrViewerError):
    """Credential-related errors.

    Attributes:
        message: Human-readable error description
        reference: The credential reference that failed (e.g., "@keyring:github/token")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The credential reference that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # super() stores the decorated text; keep the plain message
        self.message = message


class CredentialNotFoundError(CredentialError):
    """Credential reference points at nothing in its backend."""

    pass


class CredentialFormatError(CredentialError):
    """Credential reference has invalid format."""

    pass


class BackendNotAvailableError(CredentialError):
    """Requested backend is not available on this system."""

    pass


class AuthDeniedError(CredentialError):
    """No usable GitHub token could be obtained, or the user declined."""

    pass


class GitOperationError(FilePrViewerError):
    """Git operation errors.

    Base class for failures of the local ``git`` executable and for the
    discovery errors in ``file_pr_viewer.git.exceptions``.
    """

    pass


class GitCommandError(GitOperationError):
    """A git invocation exited non-zero, timed out or could not be started.

    Attributes:
        command: Argument vector that was run
        returncode: Exit status (None when the process never ran)
        stderr: Captured standard error
    """

    def __init__(
        self,
        command: tuple[str, ...] | list[str],
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()

        message = f"Command failed: {' '.join(self.command)}"
        if returncode is not None:
            message = f"{message} (exit {returncode})"
        if self.stderr:
            message = f"{message}: {self.stderr}"

        super().__init__(message)


class ExternalServiceError(FilePrViewerError):
    """External service communication errors.

    Raised when communication with external services fails
    (HTTP errors, API failures, timeouts, etc.).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response_text: Response body text (if applicable)
        """
        self.message = message
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = message


class GitHubAPIError(ExternalServiceError):
    """The GitHub REST API returned an error or an unusable payload."""

    pass


class AuthenticationError(GitHubAPIError):
    """GitHub rejected the token (HTTP 401)."""

    pass


class RateLimitError(GitHubAPIError):
    """GitHub rate limit exhausted.

    Attributes:
        reset_at: Unix timestamp at which the limit resets, if reported
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
        reset_at: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, response_text=response_text)
        self.reset_at = reset_at


class GitHubServerError(GitHubAPIError):
    """GitHub answered with a 5xx status; the request may be retried."""

    pass
