"""
Resolution pipeline for one file.

Stages, in order:

    1. locate the repository containing the file
    2. list the commits that touched the file (bounded window)
    3. resolve the configured remote to a GitHub owner/repository
    4. obtain a GitHub token
    5. look up each commit's pull request concurrently
    6. deduplicate and rank

Every failure is converted into a terminal RenderState; ``run`` never
raises except for cancellation and interrupts.
"""

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

import structlog

from file_pr_viewer.config.settings import ViewerSettings
from file_pr_viewer.engine.ranking import rank
from file_pr_viewer.engine.resolver import resolve_pull_requests
from file_pr_viewer.exceptions import AuthDeniedError, FilePrViewerError
from file_pr_viewer.git.discovery import GitRepository, open_repository
from file_pr_viewer.git.exceptions import InvalidRemoteError, NoRemoteError, NotGitRepositoryError
from file_pr_viewer.git.models import RemoteIdentity
from file_pr_viewer.models.state import RenderState, ResolutionStatus
from file_pr_viewer.providers.base import PullRequestProvider
from file_pr_viewer.providers.github_rest import GitHubRestClient

log = structlog.get_logger(__name__)


class TokenSource(Protocol):
    """Anything that can hand out a GitHub token or refuse with AuthDeniedError."""

    async def get_token(self, scopes: Sequence[str] = ("repo",)) -> str: ...


ProviderFactory = Callable[[str], PullRequestProvider]


class FilePullRequestPipeline:
    """Resolve the pull requests that touched a file.

    Args:
        settings: Viewer settings
        token_provider: Source of the GitHub token
        provider_factory: Builds a provider from a token; defaults to a
            GitHubRestClient configured from ``settings.github``
    """

    def __init__(
        self,
        settings: ViewerSettings,
        token_provider: TokenSource,
        provider_factory: ProviderFactory | None = None,
    ) -> None:
        self.settings = settings
        self.token_provider = token_provider
        self.provider_factory = provider_factory or self._github_client

    def _github_client(self, token: str) -> PullRequestProvider:
        github = self.settings.github
        return GitHubRestClient(
            token=token,
            api_url=github.api_url,
            timeout=github.timeout,
            max_connections=github.max_connections,
            retry_attempts=github.retry_attempts,
        )

    async def run(self, file_path: str | Path | None) -> RenderState:
        """Run all stages for ``file_path`` and return the terminal state."""
        if file_path is None or not str(file_path).strip():
            return RenderState.terminal(ResolutionStatus.NO_ACTIVE_FILE)

        path = Path(file_path).expanduser().absolute()
        repository: GitRepository | None = None
        identity: RemoteIdentity | None = None
        window: tuple[str, ...] = ()

        def terminal(status: ResolutionStatus, detail: str | None = None) -> RenderState:
            return RenderState.terminal(
                status,
                detail,
                file_path=path,
                repository=repository.root if repository else None,
                identity=identity,
                commits_scanned=len(window),
            )

        try:
            repository = await open_repository(path, timeout=self.settings.history.git_timeout)

            window = await repository.history(
                repository.relative_path(path),
                limit=self.settings.history.limit,
            )
            if not window:
                log.info("no_history", path=str(path))
                return terminal(ResolutionStatus.NO_HISTORY)

            identity = await repository.resolve_remote(self.settings.history.remote_name)

            token = await self.token_provider.get_token(self.settings.github.scopes)

            async with self.provider_factory(token) as provider:
                resolutions = await resolve_pull_requests(
                    provider,
                    identity,
                    window,
                    max_concurrency=self.settings.resolver.max_concurrency,
                )

        except NotGitRepositoryError:
            log.info("not_a_repository", path=str(path))
            return terminal(ResolutionStatus.NOT_A_REPOSITORY)
        except NoRemoteError as e:
            log.info("remote_missing", remote=e.remote_name)
            return terminal(ResolutionStatus.INVALID_REMOTE, e.message)
        except InvalidRemoteError as e:
            log.info("invalid_remote", url=e.url, reason=e.reason)
            return terminal(ResolutionStatus.INVALID_REMOTE, f"{e.url} ({e.reason})" if e.reason else e.url)
        except AuthDeniedError as e:
            log.warning("auth_failed", error=e.message)
            return terminal(ResolutionStatus.AUTH_FAILED)
        except FilePrViewerError as e:
            log.error("refresh_failed", error=e.message, error_type=type(e).__name__)
            return terminal(ResolutionStatus.ERROR, e.message)
        except Exception as e:
            log.exception("refresh_failed_unexpectedly", error=str(e))
            return terminal(ResolutionStatus.ERROR, str(e) or type(e).__name__)

        pull_requests = rank(resolutions)
        failed = sum(1 for r in resolutions if r.failed)

        log.info(
            "pull_requests_resolved",
            repository=identity.full_name,
            commits=len(window),
            pull_requests=len(pull_requests),
            failed_lookups=failed,
        )
        return RenderState(
            status=ResolutionStatus.RESOLVED,
            pull_requests=pull_requests,
            file_path=path,
            repository=repository.root,
            identity=identity,
            commits_scanned=len(window),
            failed_lookups=failed,
        )
