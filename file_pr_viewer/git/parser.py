"""GitHub remote URL parsing.

This module extracts the owner/repository pair from a configured Git remote
URL. Only GitHub remotes are accepted; anything else raises
InvalidRemoteError.

Supported URL formats:
    SCP-like (SSH):
        - git@github.com:owner/repo.git
        - git@github.com:owner/repo
        - git@github.com:owner/repo.git/

    URL form:
        - https://github.com/owner/repo.git
        - https://github.com/owner/repo/
        - https://user@github.com/owner/repo.git
        - ssh://git@github.com/owner/repo.git
        - ssh://git@ssh.github.com:443/owner/repo.git
        - git://github.com/owner/repo.git

Repository names keep their inner dots: only one trailing ``.git`` is
removed, so ``org/repo.name.git`` yields ``repo.name``.

Key Exports:
    GitHubRemoteParser: Parser class exposing the parsed components.
    parse_github_remote: Shortcut returning a RemoteIdentity.

Example:
    >>> from file_pr_viewer.git.parser import parse_github_remote
    >>> parse_github_remote("git@github.com:acme/widgets.git").full_name
    'acme/widgets'
"""

import re
from typing import Literal

from pydantic import ValidationError

from file_pr_viewer.git.exceptions import InvalidRemoteError
from file_pr_viewer.git.models import RemoteIdentity


class GitHubRemoteParser:
    """Parser for GitHub remote URLs in SCP-like and URL forms.

    All properties return valid values after successful initialization.
    If parsing fails, the constructor raises InvalidRemoteError.

    Attributes:
        url: Original URL, stripped of surrounding whitespace.
        url_type: 'ssh' for SCP-like URLs, 'url' for scheme://host/path.
        host: Lower-cased hostname.
        owner: Repository owner.
        repo: Repository name without ``.git``.

    Example:
        >>> parser = GitHubRemoteParser("https://github.com/acme/repo.name.git/")
        >>> parser.owner, parser.repo
        ('acme', 'repo.name')
        >>> parser.html_url
        'https://github.com/acme/repo.name'
    """

    SUPPORTED_HOSTS = frozenset({"github.com", "www.github.com", "ssh.github.com"})

    # scheme://[user@]host[:port]/path
    URL_PATTERN = re.compile(
        r"^(?P<scheme>https?|ssh|git|git\+ssh)://"
        r"(?:[^@/\s]+@)?"
        r"(?P<host>[A-Za-z0-9.-]+)"
        r"(?::(?P<port>\d+))?"
        r"/(?P<path>\S+)$"
    )

    # [user@]host:path, where path does not start with a slash
    SCP_PATTERN = re.compile(r"^(?:(?P<user>[\w.+-]+)@)?(?P<host>[A-Za-z0-9.-]+):(?P<path>[^/\s]\S*)$")

    def __init__(self, url: str) -> None:
        """Parse ``url`` immediately.

        Args:
            url: Remote URL as printed by ``git remote get-url``.

        Raises:
            InvalidRemoteError: If the URL is not a GitHub owner/repo URL.
        """
        self.url = (url or "").strip()
        self._url_type: Literal["ssh", "url"] | None = None
        self._host: str | None = None
        self._identity: RemoteIdentity | None = None

        self._parse()

    def _parse(self) -> None:
        if not self.url:
            raise InvalidRemoteError(self.url, reason="Empty remote URL")

        match = self.URL_PATTERN.match(self.url)
        if match:
            self._url_type = "url"
        else:
            match = self.SCP_PATTERN.match(self.url)
            if match:
                self._url_type = "ssh"

        if not match:
            raise InvalidRemoteError(
                self.url,
                reason="Must be SSH (git@github.com:owner/repo) or HTTPS (https://github.com/owner/repo)",
            )

        host = match.group("host").lower()
        if host not in self.SUPPORTED_HOSTS:
            raise InvalidRemoteError(self.url, reason=f"Unsupported host {host}")

        self._host = host
        self._identity = self._extract_identity(match.group("path"))

    def _extract_identity(self, raw_path: str) -> RemoteIdentity:
        """Split ``owner/repo(.git)?/?`` into a RemoteIdentity.

        The ``.git`` suffix is removed by RemoteIdentity itself.

        Raises:
            InvalidRemoteError: If the path is not exactly two valid segments.
        """
        path = raw_path.strip("/")
        parts = path.split("/")

        if len(parts) != 2:
            raise InvalidRemoteError(self.url, reason=f"Path must be owner/repo (got: {path})")

        try:
            return RemoteIdentity(owner=parts[0], repo=parts[1])
        except ValidationError as e:
            reason = e.errors()[0]["msg"].removeprefix("Value error, ")
            raise InvalidRemoteError(self.url, reason=reason) from e

    @property
    def url_type(self) -> Literal["ssh", "url"]:
        """Detected URL form."""
        if self._url_type is None:
            raise ValueError("URL not parsed")
        return self._url_type

    @property
    def host(self) -> str:
        """Lower-cased hostname of the remote."""
        if self._host is None:
            raise ValueError("URL not parsed")
        return self._host

    @property
    def identity(self) -> RemoteIdentity:
        if self._identity is None:
            raise ValueError("URL not parsed")
        return self._identity

    @property
    def owner(self) -> str:
        return self.identity.owner

    @property
    def repo(self) -> str:
        return self.identity.repo

    @property
    def html_url(self) -> str:
        """Browser URL of the repository on github.com."""
        return f"https://github.com/{self.owner}/{self.repo}"


def parse_github_remote(url: str) -> RemoteIdentity:
    """Resolve a remote URL to its GitHub owner/repository pair.

    Args:
        url: Remote URL (SSH or HTTPS form).

    Returns:
        RemoteIdentity for the remote.

    Raises:
        InvalidRemoteError: If the URL does not reference a GitHub repository.

    Example:
        >>> parse_github_remote("https://github.com/acme/widgets.git")
        RemoteIdentity(owner='acme', repo='widgets')
        >>> parse_github_remote("https://gitlab.com/acme/widgets.git")
        Traceback (most recent call last):
            ...
        InvalidRemoteError: Not a GitHub repository: ...
    """
    return GitHubRemoteParser(url).identity
