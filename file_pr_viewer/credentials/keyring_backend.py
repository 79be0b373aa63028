"""OS keyring backend.

Platform Support:
- Linux: Secret Service API (GNOME Keyring, KWallet)
- macOS: Keychain
- Windows: Windows Credential Locker
"""

import logging
from typing import cast

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError, PasswordDeleteError

from file_pr_viewer.exceptions import BackendNotAvailableError, CredentialError

logger = logging.getLogger(__name__)

_UNAVAILABLE_SUGGESTION = (
    "No usable keyring was found on this system.\n"
    "Use an environment variable instead: export GITHUB_TOKEN=..."
)


class KeyringBackend:
    """Credential storage in the operating system keyring.

    This is where ``file-prs credentials set`` stores the GitHub token, under
    service ``file-pr-viewer`` and key ``github_token``.

    Example:
        >>> backend = KeyringBackend()
        >>> backend.set("file-pr-viewer", "github_token", "ghp_abc123")
        >>> backend.get("file-pr-viewer", "github_token")
        'ghp_abc123'
    """

    @property
    def name(self) -> str:
        return "keyring"

    @property
    def available(self) -> bool:
        """False on headless systems where keyring falls back to its fail backend."""
        try:
            return not isinstance(keyring.get_keyring(), FailKeyring)
        except Exception as e:
            logger.debug(f"Keyring not available: {e}")
            return False

    def _require_available(self) -> None:
        if not self.available:
            raise BackendNotAvailableError(
                "Keyring backend is not available",
                suggestion=_UNAVAILABLE_SUGGESTION,
            )

    def get(self, service: str, key: str | None = None) -> str | None:
        """Retrieve a credential from the keyring.

        Returns:
            Credential value or None if not found

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If the keyring operation fails
        """
        self._require_available()

        try:
            credential = cast(str | None, keyring.get_password(service, key or ""))
        except KeyringError as e:
            raise CredentialError(
                f"Keyring operation failed: {e}", reference=f"@keyring:{service}/{key}"
            ) from e

        if credential is not None:
            logger.debug(f"Retrieved credential from keyring: {service}/{key}")
        return credential

    def set(self, service: str, key: str | None, value: str) -> None:
        """Store a credential in the keyring.

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If the keyring operation fails
            ValueError: If value is empty
        """
        self._require_available()

        if not value:
            raise ValueError("Credential value cannot be empty")

        try:
            keyring.set_password(service, key or "", value)
        except KeyringError as e:
            raise CredentialError(
                f"Failed to store credential: {e}", reference=f"@keyring:{service}/{key}"
            ) from e
        logger.info(f"Stored credential in keyring: {service}/{key}")

    def delete(self, service: str, key: str | None = None) -> bool:
        """Delete a credential, returning False if it was not stored."""
        self._require_available()

        try:
            keyring.delete_password(service, key or "")
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise CredentialError(
                f"Failed to delete credential: {e}", reference=f"@keyring:{service}/{key}"
            ) from e

        logger.info(f"Deleted credential from keyring: {service}/{key}")
        return True
