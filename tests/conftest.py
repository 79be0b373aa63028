"""Pytest configuration and shared fixtures."""

import subprocess
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from file_pr_viewer.config.settings import ViewerSettings
from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.models.domain import PullRequestRecord, PullRequestState
from file_pr_viewer.providers.base import PullRequestProvider


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def commit_file(repo: Path, relative: str, content: str, message: str) -> str:
    """Write ``relative``, commit it and return the new commit id."""
    path = repo / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    git(repo, "add", relative)
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Empty git repository with a committer identity configured."""
    repo = tmp_path / "widgets"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def github_repo(git_repo: Path) -> Path:
    """Repository with a GitHub origin and three commits touching src/app.py."""
    git(git_repo, "remote", "add", "origin", "git@github.com:acme/widgets.git")
    commit_file(git_repo, "src/app.py", "print('a')\n", "first")
    commit_file(git_repo, "README.md", "# widgets\n", "docs")
    commit_file(git_repo, "src/app.py", "print('b')\n", "second")
    commit_file(git_repo, "src/app.py", "print('c')\n", "third")
    return git_repo


@pytest.fixture
def identity() -> RemoteIdentity:
    return RemoteIdentity(owner="acme", repo="widgets")


@pytest.fixture
def settings() -> ViewerSettings:
    """Default settings, unaffected by config files in the working directory."""
    return ViewerSettings()


@pytest.fixture
def make_record() -> Callable[..., PullRequestRecord]:
    """Factory for PullRequestRecord with sensible defaults."""

    def _make(
        number: int,
        merged_at: datetime | None = None,
        updated_at: datetime | None = None,
        **kwargs: object,
    ) -> PullRequestRecord:
        defaults: dict[str, object] = {
            "title": f"PR {number}",
            "url": f"https://github.com/acme/widgets/pull/{number}",
            "state": PullRequestState.CLOSED if merged_at else PullRequestState.OPEN,
            "author": "jdoe",
        }
        defaults.update(kwargs)
        return PullRequestRecord(
            number=number,
            merged_at=merged_at,
            updated_at=updated_at,
            **defaults,  # type: ignore[arg-type]
        )

    return _make


def ts(day: int, hour: int = 12) -> datetime:
    """UTC timestamp in March 2024."""
    return datetime(2024, 3, day, hour, tzinfo=UTC)


class FakeProvider(PullRequestProvider):
    """In-memory provider mapping commit ids to responses.

    A response is a list of records, or an exception instance to raise.
    Unknown commits return an empty list.
    """

    def __init__(self, responses: dict[str, list[PullRequestRecord] | Exception] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []
        self.connected = False
        self.disconnected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.disconnected = True

    async def list_pulls_for_commit(self, identity: RemoteIdentity, sha: str) -> list[PullRequestRecord]:
        self.calls.append(sha)
        response = self.responses.get(sha, [])
        if isinstance(response, Exception):
            raise response
        return list(response)


class StaticTokenProvider:
    """Token source returning a fixed token, or raising the given error."""

    def __init__(self, token: str = "ghp_test", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.requested_scopes: list[tuple[str, ...]] = []

    async def get_token(self, scopes: tuple[str, ...] | list[str] = ("repo",)) -> str:
        self.requested_scopes.append(tuple(scopes))
        if self.error is not None:
            raise self.error
        return self.token


@pytest.fixture
def run_git() -> Callable[..., str]:
    return git


@pytest.fixture
def commit() -> Callable[[Path, str, str, str], str]:
    return commit_file


@pytest.fixture
def at() -> Callable[..., datetime]:
    return ts


@pytest.fixture
def fake_provider() -> type[FakeProvider]:
    return FakeProvider


@pytest.fixture
def static_token() -> type[StaticTokenProvider]:
    return StaticTokenProvider
