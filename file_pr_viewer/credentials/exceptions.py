"""Credential-related exceptions.

Re-exported from file_pr_viewer.exceptions so the credentials package can be
used on its own.
"""

from file_pr_viewer.exceptions import (
    AuthDeniedError,
    BackendNotAvailableError,
    CredentialError,
    CredentialFormatError,
    CredentialNotFoundError,
)

__all__ = [
    "AuthDeniedError",
    "BackendNotAvailableError",
    "CredentialError",
    "CredentialFormatError",
    "CredentialNotFoundError",
]
