"""GitHub token acquisition.

The resolution pipeline needs a token for the GitHub API and nothing else.
``GitHubTokenProvider`` looks for one in the places a developer machine or a
CI runner usually keeps it, and prompts only as a last resort.

Lookup order:
    1. The configured credential reference (``github.token`` in the config)
    2. ``GITHUB_TOKEN`` / ``GH_TOKEN`` environment variables
    3. The OS keyring, ``file-pr-viewer/github_token``
    4. ``gh auth token`` from the GitHub CLI
    5. A hidden interactive prompt, when enabled and stdin is a terminal
"""

import asyncio
import logging
import subprocess
import sys
from collections.abc import Callable, Sequence

import click

from file_pr_viewer.utils.async_subprocess import run_command

from .exceptions import AuthDeniedError, CredentialError
from .resolver import CredentialResolver

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "file-pr-viewer"
KEYRING_KEY = "github_token"
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")
GH_CLI_TIMEOUT = 10.0


def _prompt_for_token(scopes: Sequence[str]) -> str:
    return click.prompt(
        f"GitHub token (needs scopes: {', '.join(scopes)})",
        hide_input=True,
        default="",
        show_default=False,
        err=True,
    )


class GitHubTokenProvider:
    """Obtain a GitHub API token, raising AuthDeniedError when none is available.

    The first token found is cached for the lifetime of the provider, so
    repeated refreshes do not prompt again.

    Args:
        token_reference: Configured reference (``@keyring:...``, ``${VAR}`` or a
            literal token). A reference that cannot be resolved is skipped.
        resolver: Credential resolver, defaults to environment and keyring
        interactive: Allow prompting on a terminal
        use_gh_cli: Ask the GitHub CLI for its token
        store_prompted: Save a prompted token in the keyring
        prompt: Prompt callable, replaced in tests
        is_tty: Terminal check, replaced in tests
    """

    def __init__(
        self,
        token_reference: str | None = None,
        resolver: CredentialResolver | None = None,
        interactive: bool = False,
        use_gh_cli: bool = True,
        store_prompted: bool = True,
        prompt: Callable[[Sequence[str]], str] = _prompt_for_token,
        is_tty: Callable[[], bool] | None = None,
    ) -> None:
        self.token_reference = token_reference
        self.resolver = resolver or CredentialResolver()
        self.interactive = interactive
        self.use_gh_cli = use_gh_cli
        self.store_prompted = store_prompted
        self._prompt = prompt
        self._is_tty = is_tty or (lambda: sys.stdin.isatty())
        self._token: str | None = None
        self._lock = asyncio.Lock()

    async def get_token(self, scopes: Sequence[str] = ("repo",)) -> str:
        """Return a GitHub token.

        Args:
            scopes: OAuth scopes the token needs; shown when prompting

        Raises:
            AuthDeniedError: If no source yields a token
        """
        async with self._lock:
            if self._token is None:
                self._token = await self._acquire(scopes)
            return self._token

    async def _acquire(self, scopes: Sequence[str]) -> str:
        token = self._from_reference() or self._from_environment() or self._from_keyring()
        if token:
            return token

        if self.use_gh_cli:
            token = await self._from_gh_cli()
            if token:
                return token

        if self.interactive and self._is_tty():
            token = await self._from_prompt(scopes)
            if token:
                return token

        raise AuthDeniedError(
            "No GitHub token available",
            suggestion=(
                "Provide a token with one of:\n"
                "  export GITHUB_TOKEN=...\n"
                "  file-prs credentials set\n"
                "  gh auth login"
            ),
        )

    def _from_reference(self) -> str | None:
        if not self.token_reference:
            return None
        try:
            token = self.resolver.resolve(self.token_reference)
        except CredentialError as e:
            logger.warning(f"Configured GitHub token could not be resolved: {e.message}")
            return None
        logger.debug("Using configured GitHub token")
        return token

    def _from_environment(self) -> str | None:
        for var in TOKEN_ENV_VARS:
            try:
                token = self.resolver.resolve(f"${{{var}}}", cache=False)
            except CredentialError:
                continue
            logger.debug(f"Using GitHub token from {var}")
            return token
        return None

    def _from_keyring(self) -> str | None:
        try:
            token = self.resolver.resolve(f"@keyring:{KEYRING_SERVICE}/{KEYRING_KEY}", cache=False)
        except CredentialError as e:
            logger.debug(f"No GitHub token in keyring: {e.message}")
            return None
        logger.debug("Using GitHub token from keyring")
        return token

    async def _from_gh_cli(self) -> str | None:
        try:
            stdout, _, _ = await run_command(
                "gh", "auth", "token", "--hostname", "github.com", timeout=GH_CLI_TIMEOUT
            )
        except (OSError, subprocess.CalledProcessError, TimeoutError) as e:
            logger.debug(f"GitHub CLI token unavailable: {e}")
            return None

        token = stdout.strip()
        if token:
            logger.debug("Using GitHub token from the GitHub CLI")
        return token or None

    async def _from_prompt(self, scopes: Sequence[str]) -> str | None:
        token = (await asyncio.to_thread(self._prompt, scopes)).strip()
        if not token:
            logger.info("GitHub token prompt declined")
            return None

        if self.store_prompted:
            try:
                self.resolver.backend("keyring").set(KEYRING_SERVICE, KEYRING_KEY, token)
            except (CredentialError, ValueError) as e:
                logger.warning(f"Could not store GitHub token in keyring: {e}")
        return token
