"""Git repository data models.

Example:
    >>> from file_pr_viewer.git.models import RemoteIdentity
    >>> identity = RemoteIdentity(owner="acme", repo="widgets")
    >>> identity.full_name
    'acme/widgets'
"""

from pydantic import BaseModel, ConfigDict, field_validator


class RemoteIdentity(BaseModel):
    """Owner/repository pair of a GitHub remote.

    Instances are immutable and hashable. Both fields must be non-empty path
    segments: no whitespace and no slashes.

    Attributes:
        owner: Repository owner (user or organization)
        repo: Repository name, without a ``.git`` suffix
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @field_validator("owner", "repo")
    @classmethod
    def validate_segment(cls, v: str) -> str:
        """Ensure owner and repo are single, non-empty path segments.

        Raises:
            ValueError: If value is empty or contains whitespace or a slash
        """
        if not v or not v.strip():
            raise ValueError("Owner and repo must not be empty")
        if "/" in v or any(ch.isspace() for ch in v):
            raise ValueError(f"Invalid path segment: {v!r}")
        return v

    @field_validator("repo")
    @classmethod
    def validate_no_git_suffix(cls, v: str) -> str:
        """Strip a single trailing ``.git``; a bare ``.git`` is rejected."""
        stripped = v.removesuffix(".git")
        if not stripped:
            raise ValueError("Repository name must not be empty")
        return stripped

    @property
    def full_name(self) -> str:
        """Return owner/repo format."""
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return self.full_name
