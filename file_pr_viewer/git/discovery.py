"""Local Git repository access.

This module wraps the three capabilities the resolution pipeline needs from
the ``git`` executable:

    - find the repository root for a path (``git rev-parse --show-toplevel``)
    - list commits touching a path, newest first (``git log``)
    - read a configured remote URL (``git remote get-url``)

Root detection delegates to git itself, so nested repositories, submodules
and linked worktrees resolve exactly as they would on the command line.

Key Exports:
    locate_repository: Find the working-tree root for a file, or None.
    open_repository: Same, raising NotGitRepositoryError instead of returning None.
    GitRepository: History and remote access for a located repository.

Example:
    >>> from file_pr_viewer.git.discovery import GitRepository, locate_repository
    >>> root = await locate_repository("/work/widgets/src/app.py")
    >>> repo = GitRepository(root)
    >>> window = await repo.history(repo.relative_path("/work/widgets/src/app.py"), limit=25)
    >>> identity = await repo.resolve_remote("origin")
    >>> print(f"{identity.full_name}: {len(window)} commits")
    acme/widgets: 25 commits

Thread Safety:
    Every call starts an independent git process; instances hold no mutable
    state and may be shared between tasks.
"""

import os
import subprocess
from pathlib import Path

import structlog

from file_pr_viewer.exceptions import GitCommandError
from file_pr_viewer.git.exceptions import NoRemoteError, NotGitRepositoryError
from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.git.parser import parse_github_remote
from file_pr_viewer.utils.async_subprocess import run_command

log = structlog.get_logger(__name__)

GIT_EXECUTABLE = "git"
DEFAULT_HISTORY_LIMIT = 25
DEFAULT_GIT_TIMEOUT = 30.0


def _nearest_existing_directory(file_path: Path) -> Path | None:
    """Return the closest existing directory at or above the file's parent."""
    for candidate in (file_path.parent, *file_path.parent.parents):
        if candidate.is_dir():
            return candidate
    return None


async def locate_repository(
    file_path: str | Path,
    timeout: float | None = DEFAULT_GIT_TIMEOUT,
) -> Path | None:
    """Find the top-level working-tree directory containing ``file_path``.

    The file itself does not have to exist. Git is started in the file's
    containing directory (or its nearest existing ancestor).

    Args:
        file_path: Absolute path of the file.
        timeout: Seconds to wait for git.

    Returns:
        Absolute repository root, or None when the path is not inside a
        repository or git could not be run for any reason.
    """
    path = Path(file_path).expanduser()
    if not path.is_absolute():
        path = path.absolute()

    start_dir = _nearest_existing_directory(path)
    if start_dir is None:
        log.debug("repository_not_found", path=str(path), reason="no_existing_parent")
        return None

    try:
        stdout, _, _ = await run_command(
            GIT_EXECUTABLE,
            "rev-parse",
            "--show-toplevel",
            cwd=start_dir,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        log.debug("repository_not_found", path=str(path), returncode=e.returncode, stderr=(e.stderr or "").strip())
        return None
    except (OSError, TimeoutError) as e:
        log.debug("repository_lookup_failed", path=str(path), error=str(e))
        return None

    root = stdout.strip()
    if not root:
        log.debug("repository_not_found", path=str(path), reason="empty_toplevel")
        return None

    return Path(root)


class GitRepository:
    """History and remote queries against a located repository root.

    Attributes:
        root: Absolute working-tree root.
        timeout: Seconds to wait for each git invocation.
    """

    def __init__(self, root: str | Path, timeout: float | None = DEFAULT_GIT_TIMEOUT) -> None:
        self.root = Path(root)
        self.timeout = timeout

    async def _git(self, *args: str) -> str:
        """Run git in the repository root and return stdout.

        Raises:
            GitCommandError: If git exits non-zero, times out or cannot start.
        """
        command = (GIT_EXECUTABLE, *args)
        try:
            stdout, _, _ = await run_command(*command, cwd=self.root, timeout=self.timeout)
        except subprocess.CalledProcessError as e:
            raise GitCommandError(command, returncode=e.returncode, stderr=e.stderr) from e
        except TimeoutError as e:
            raise GitCommandError(command, stderr=f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise GitCommandError(command, stderr=str(e)) from e
        return stdout

    def relative_path(self, file_path: str | Path) -> str:
        """Express ``file_path`` relative to the root, in git's slash form.

        Symlinked directories are resolved on both sides first, since git
        reports the physical root. The final component is kept as given, so a
        symlinked file is looked up under its own name, not its target's.
        """
        path = Path(file_path).absolute()
        try:
            relative = (path.parent.resolve() / path.name).relative_to(self.root.resolve())
        except ValueError:
            relative = Path(os.path.relpath(path, self.root))
        return relative.as_posix()

    async def history(self, relative_path: str, limit: int = DEFAULT_HISTORY_LIMIT) -> tuple[str, ...]:
        """List commits that modified ``relative_path``, newest first.

        Args:
            relative_path: Path relative to the repository root.
            limit: Maximum number of commits to return (>= 1).

        Returns:
            Commit ids, at most ``limit`` long. Empty when the path has no
            recorded history.

        Raises:
            ValueError: If limit is smaller than 1.
            GitCommandError: If git log fails.
        """
        if limit < 1:
            raise ValueError(f"History limit must be at least 1 (got {limit})")

        stdout = await self._git(
            "log",
            f"--max-count={limit}",
            "--pretty=format:%H",
            "--",
            relative_path,
        )

        seen: set[str] = set()
        window: list[str] = []
        for line in stdout.splitlines():
            sha = line.strip()
            if sha and sha not in seen:
                seen.add(sha)
                window.append(sha)

        log.debug("history_loaded", path=relative_path, commits=len(window), limit=limit)
        return tuple(window[:limit])

    async def remote_url(self, name: str = "origin") -> str | None:
        """Return the configured URL of remote ``name``, or None if absent."""
        try:
            stdout = await self._git("remote", "get-url", name)
        except GitCommandError as e:
            log.debug("remote_not_found", remote=name, error=e.stderr)
            return None

        url = stdout.strip()
        return url or None

    async def resolve_remote(self, name: str = "origin") -> RemoteIdentity:
        """Resolve remote ``name`` to its GitHub owner/repository pair.

        Raises:
            NoRemoteError: If the remote is not configured.
            InvalidRemoteError: If the remote is not a GitHub URL.
        """
        url = await self.remote_url(name)
        if url is None:
            raise NoRemoteError(name)
        return parse_github_remote(url)


async def open_repository(file_path: str | Path, timeout: float | None = DEFAULT_GIT_TIMEOUT) -> GitRepository:
    """Locate the repository containing ``file_path``.

    Raises:
        NotGitRepositoryError: If no working tree contains the path.
    """
    root = await locate_repository(file_path, timeout=timeout)
    if root is None:
        raise NotGitRepositoryError(str(file_path))
    return GitRepository(root, timeout=timeout)
