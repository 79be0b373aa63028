"""
Configuration system using Pydantic for type-safe settings management.

Every setting has a default, so the viewer runs without a config file.
Values come from, in increasing precedence: defaults, ``FILE_PRS_``
environment variables (``FILE_PRS_HISTORY__LIMIT=10``) and a YAML file.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from file_pr_viewer.exceptions import ConfigurationError

DEFAULT_CONFIG_PATHS = (Path(".file-prs.yaml"), Path.home() / ".config" / "file-prs" / "config.yaml")


class GitHubConfig(BaseModel):
    """GitHub API access.

    ``token`` accepts credential references:
    - token: "@keyring:file-pr-viewer/github_token"
    - token: "${GITHUB_TOKEN:-}"
    When unset, the token provider searches the environment, the keyring and
    the GitHub CLI.
    """

    api_url: str = Field(default="https://api.github.com", description="REST API root URL")
    token: str | None = Field(default=None, description="Token or credential reference")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    max_connections: int = Field(default=25, ge=1, description="HTTP connection pool size")
    retry_attempts: int = Field(default=1, ge=1, le=10, description="Attempts per request (1 = no retry)")
    scopes: list[str] = Field(default_factory=lambda: ["repo"], description="OAuth scopes requested")

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("token")
    @classmethod
    def blank_token_is_unset(cls, v: str | None) -> str | None:
        return v if v and v.strip() else None


class HistoryConfig(BaseModel):
    """Local history scan."""

    limit: int = Field(default=25, ge=1, le=100, description="Commits scanned per file")
    remote_name: str = Field(default="origin", min_length=1, description="Remote naming the GitHub repository")
    git_timeout: float = Field(default=30.0, gt=0, description="Timeout for each git invocation in seconds")


class ResolverConfig(BaseModel):
    """Commit lookup fan-out."""

    max_concurrency: int | None = Field(
        default=None, ge=1, description="In-flight lookups per refresh; unset means the whole window"
    )


class ViewerSettings(BaseSettings):
    """Main file-pr-viewer settings.

    Combines all configuration sections and provides methods for loading
    from YAML files with environment variable interpolation.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILE_PRS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> ViewerSettings:
        """Load settings from ``config_path``, a default location, or defaults only.

        Raises:
            ConfigurationError: If an explicitly given file is missing or invalid
        """
        if config_path is not None:
            return cls.from_yaml(config_path)

        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.is_file():
                return cls.from_yaml(candidate)

        try:
            return cls()
        except Exception as e:
            raise ConfigurationError(f"Invalid settings in environment: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> ViewerSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} and ${VAR_NAME:-default} substitution.

        Raises:
            ConfigurationError: If config file is invalid or missing
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
