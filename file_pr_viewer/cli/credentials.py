"""CLI commands for GitHub token management.

This module provides the ``file-prs credentials`` command group. The token
is stored in the OS keyring under ``file-pr-viewer/github_token``, where
the token provider looks for it after the environment.

Commands:
    - set: Store the GitHub token in the keyring
    - delete: Remove the stored token
    - test: Show which backends are available and where a token would come from

Example:
    Store a token and check that it is found::

        $ file-prs credentials set
        $ file-prs credentials test
"""

import asyncio
import sys

import click

from file_pr_viewer.credentials import (
    KEYRING_KEY,
    KEYRING_SERVICE,
    AuthDeniedError,
    CredentialError,
    GitHubTokenProvider,
    KeyringBackend,
)


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "*" * (len(value) - 8) + value[-4:]
    return "*" * len(value)


def _fail(e: CredentialError) -> None:
    click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
    if e.suggestion:
        click.echo(click.style(f"Suggestion: {e.suggestion}", fg="yellow"), err=True)
    sys.exit(1)


@click.group(name="credentials")
def credentials_group() -> None:
    """Manage the GitHub token used for API requests.

    Examples:

        # Store the token in the OS keyring
        file-prs credentials set

        # Check where the token would be taken from
        file-prs credentials test

        # Remove the stored token
        file-prs credentials delete
    """
    pass


@credentials_group.command(name="set")
@click.option(
    "--value",
    prompt="GitHub token",
    hide_input=True,
    confirmation_prompt=True,
    help="Token value (will prompt if not provided)",
)
def set_credential(value: str) -> None:
    """Store the GitHub token in the OS keyring."""
    try:
        KeyringBackend().set(KEYRING_SERVICE, KEYRING_KEY, value.strip())
    except CredentialError as e:
        _fail(e)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Stored in keyring: {KEYRING_SERVICE}/{KEYRING_KEY}")
    click.echo(f"Reference: @keyring:{KEYRING_SERVICE}/{KEYRING_KEY}")
    click.echo(click.style("Credential stored successfully", fg="green"))


@credentials_group.command(name="delete")
@click.confirmation_option(prompt="Are you sure you want to delete the stored GitHub token?")
def delete_credential() -> None:
    """Remove the GitHub token from the OS keyring."""
    try:
        deleted = KeyringBackend().delete(KEYRING_SERVICE, KEYRING_KEY)
    except CredentialError as e:
        _fail(e)
        return

    if deleted:
        click.echo(click.style("Credential deleted successfully", fg="green"))
    else:
        click.echo(click.style("Credential not found", fg="yellow"))


@credentials_group.command(name="test")
@click.option("--show-value", is_flag=True, help="Show the full token (default: masked)")
@click.pass_context
def test_credentials(ctx: click.Context, show_value: bool) -> None:
    """Check backend availability and resolve the GitHub token.

    Never prompts. Exits with status 1 when no token is found.
    """
    click.echo(click.style("Testing credential backends...", bold=True))
    click.echo()

    click.echo("Keyring backend: ", nl=False)
    if KeyringBackend().available:
        click.echo(click.style("Available", fg="green"))
    else:
        click.echo(click.style("Not available", fg="yellow"))

    click.echo("Environment backend: ", nl=False)
    click.echo(click.style("Available", fg="green"))
    click.echo()

    settings = ctx.obj.get("settings") if ctx.obj else None
    provider = GitHubTokenProvider(
        token_reference=settings.github.token if settings else None,
        interactive=False,
    )

    try:
        token = asyncio.run(provider.get_token(settings.github.scopes if settings else ("repo",)))
    except AuthDeniedError as e:
        _fail(e)
        return

    click.echo(f"GitHub token: {token if show_value else _mask(token)}")
    click.echo(click.style("GitHub token resolved successfully", fg="green"))
