"""Protocol shared by credential storage backends."""

from typing import Protocol


class CredentialBackend(Protocol):
    """Interface the CredentialResolver expects from a backend.

    ``service`` names the owner of a credential (``file-pr-viewer``) and
    ``key`` the credential within it (``github_token``). Backends without a
    two-level namespace, such as environment variables, ignore ``key``.
    """

    @property
    def name(self) -> str:
        """Backend identifier matched against reference prefixes."""
        ...

    @property
    def available(self) -> bool:
        """Whether the backend can be used on this system."""
        ...

    def get(self, service: str, key: str | None = None) -> str | None:
        """Return the stored credential or None if it does not exist.

        Raises:
            BackendNotAvailableError: If the backend is not available
        """
        ...

    def set(self, service: str, key: str | None, value: str) -> None:
        """Store a credential.

        Raises:
            BackendNotAvailableError: If the backend is not available
        """
        ...

    def delete(self, service: str, key: str | None = None) -> bool:
        """Delete a credential, returning False when it did not exist."""
        ...
