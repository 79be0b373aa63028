"""Environment variable backend.

Tokens injected by CI runners, containers or a shell profile
(``GITHUB_TOKEN``, ``GH_TOKEN``) are read through this backend.
"""

import logging
import os

logger = logging.getLogger(__name__)


class EnvironmentBackend:
    """Read credentials from environment variables.

    The variable name is passed as ``service``; ``key`` is ignored.

    Example:
        >>> backend = EnvironmentBackend()
        >>> backend.get("GITHUB_TOKEN")
        'ghp_abc123...'
    """

    @property
    def name(self) -> str:
        return "environment"

    @property
    def available(self) -> bool:
        """Environment variables are always readable."""
        return True

    def get(self, service: str, key: str | None = None) -> str | None:
        """Return the variable's value, or None if unset or blank."""
        value = os.environ.get(service)
        if value is None or not value.strip():
            return None

        logger.debug(f"Retrieved credential from environment: {service}")
        return value.strip()

    def set(self, service: str, key: str | None, value: str) -> None:
        """Set the variable for this process and its children only."""
        if not value:
            raise ValueError("Credential value cannot be empty")

        os.environ[service] = value
        logger.debug(f"Set environment variable: {service}")

    def delete(self, service: str, key: str | None = None) -> bool:
        if service in os.environ:
            del os.environ[service]
            logger.debug(f"Deleted environment variable: {service}")
            return True
        return False
