"""Resolution of credential references to their values."""

import logging
import re
from collections.abc import Sequence

from .backend import CredentialBackend
from .environment_backend import EnvironmentBackend
from .exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialFormatError,
    CredentialNotFoundError,
)
from .keyring_backend import KeyringBackend

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve credential references to actual values.

    Supported reference formats:
    1. @keyring:service/key - OS keyring
    2. ${VAR_NAME} - Environment variable
    3. Direct value - Returned as-is (not recommended)

    Example:
        >>> resolver = CredentialResolver()
        >>> token = resolver.resolve("@keyring:file-pr-viewer/github_token")
        >>> token = resolver.resolve("${GITHUB_TOKEN}")
    """

    KEYRING_PATTERN = re.compile(r"^@keyring:([^/]+)/(.+)$")
    ENV_PATTERN = re.compile(r"^\$\{([A-Z_][A-Z0-9_]*)\}$")

    def __init__(self, backends: Sequence[CredentialBackend] | None = None) -> None:
        """Initialize credential resolver.

        Args:
            backends: Backends to use instead of the default environment and
                keyring backends. Matched to references by ``name``.
        """
        self._backends: tuple[CredentialBackend, ...] = (
            tuple(backends) if backends else (EnvironmentBackend(), KeyringBackend())
        )
        self._cache: dict[str, str] = {}

    @property
    def backends(self) -> tuple[CredentialBackend, ...]:
        return self._backends

    def backend(self, name: str) -> CredentialBackend:
        """Return the configured backend called ``name``.

        Raises:
            BackendNotAvailableError: If no such backend is configured
        """
        for backend in self._backends:
            if backend.name == name:
                return backend
        raise BackendNotAvailableError(f"No {name} backend configured")

    def resolve(self, value: str, cache: bool = True) -> str:
        """Resolve a credential reference to its value.

        Args:
            value: Credential reference or direct value
            cache: Whether to cache the resolved value

        Returns:
            Resolved credential value

        Raises:
            CredentialNotFoundError: If the referenced credential doesn't exist
            CredentialFormatError: If the reference is empty or malformed
            BackendNotAvailableError: If the required backend is unavailable
        """
        if not value or not value.strip():
            raise CredentialFormatError("Credential reference is empty", reference=value)
        value = value.strip()

        if cache and value in self._cache:
            logger.debug(f"Credential resolved from cache: {value}")
            return self._cache[value]

        keyring_match = self.KEYRING_PATTERN.match(value)
        env_match = self.ENV_PATTERN.match(value)

        if keyring_match:
            resolved = self._lookup("keyring", keyring_match.group(1), keyring_match.group(2), value)
        elif env_match:
            resolved = self._lookup("environment", env_match.group(1), None, value)
        elif value.startswith("@keyring:") or value.startswith("${"):
            raise CredentialFormatError(
                f"Malformed credential reference: {value}",
                reference=value,
                suggestion="Use @keyring:service/key or ${UPPER_CASE_VAR}",
            )
        else:
            if self._looks_like_token(value):
                logger.warning(
                    "Credential appears to be a direct token value. "
                    "Consider using @keyring: or ${ENV_VAR} instead."
                )
            return value

        if cache:
            self._cache[value] = resolved
        return resolved

    def _lookup(self, backend_name: str, service: str, key: str | None, reference: str) -> str:
        backend = self.backend(backend_name)

        if not backend.available:
            raise BackendNotAvailableError(
                f"{backend_name.capitalize()} backend is not available on this system",
                reference=reference,
                suggestion="Use an environment variable reference instead: ${GITHUB_TOKEN}",
            )

        try:
            credential = backend.get(service, key)
        except CredentialError:
            raise
        except Exception as e:
            raise CredentialError(
                f"Failed to resolve {backend_name} credential: {e}",
                reference=reference,
            ) from e

        if credential is None:
            if backend_name == "environment":
                raise CredentialNotFoundError(
                    f"Environment variable not set: {service}",
                    reference=reference,
                    suggestion=f"Set the environment variable:\n  export {service}='your-token-here'",
                )
            raise CredentialNotFoundError(
                f"Credential not found in keyring: {service}/{key}",
                reference=reference,
                suggestion="Store the token with:\n  file-prs credentials set",
            )

        log_key = f"{service}/{key}" if key else service
        logger.debug(f"Resolved {backend_name} credential: {log_key}")
        return credential

    @staticmethod
    def _looks_like_token(value: str) -> bool:
        """Heuristic check for GitHub token prefixes and long opaque strings."""
        if value.startswith(("ghp_", "gho_", "ghu_", "ghs_", "ghr_", "github_pat_")):
            return True
        return len(value) > 20 and value.replace("-", "").replace("_", "").isalnum()

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.debug("Credential cache cleared")
