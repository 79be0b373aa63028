"""Credential storage and GitHub token acquisition.

Key Components:
    - CredentialResolver: Resolve ``@keyring:service/key`` and ``${VAR}`` references
    - EnvironmentBackend / KeyringBackend: Storage backends
    - GitHubTokenProvider: Token lookup chain used by the resolution pipeline
"""

from .backend import CredentialBackend
from .environment_backend import EnvironmentBackend
from .exceptions import (
    AuthDeniedError,
    BackendNotAvailableError,
    CredentialError,
    CredentialFormatError,
    CredentialNotFoundError,
)
from .keyring_backend import KeyringBackend
from .provider import KEYRING_KEY, KEYRING_SERVICE, GitHubTokenProvider
from .resolver import CredentialResolver

__all__ = [
    "AuthDeniedError",
    "BackendNotAvailableError",
    "CredentialBackend",
    "CredentialError",
    "CredentialFormatError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "EnvironmentBackend",
    "GitHubTokenProvider",
    "KEYRING_KEY",
    "KEYRING_SERVICE",
    "KeyringBackend",
]
