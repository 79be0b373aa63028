"""Tests for file_pr_viewer/config/settings.py."""

import pytest

from file_pr_viewer.config.settings import ViewerSettings
from file_pr_viewer.exceptions import ConfigurationError


class TestDefaults:
    def test_defaults(self):
        settings = ViewerSettings()

        assert settings.github.api_url == "https://api.github.com"
        assert settings.github.token is None
        assert settings.github.timeout == 30.0
        assert settings.github.retry_attempts == 1
        assert settings.github.scopes == ["repo"]
        assert settings.history.limit == 25
        assert settings.history.remote_name == "origin"
        assert settings.resolver.max_concurrency is None
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("FILE_PRS_HISTORY__LIMIT", "10")
        monkeypatch.setenv("FILE_PRS_GITHUB__API_URL", "https://ghe.example.com/api/v3/")
        monkeypatch.setenv("FILE_PRS_LOG_LEVEL", "debug")

        settings = ViewerSettings()

        assert settings.history.limit == 10
        assert settings.github.api_url == "https://ghe.example.com/api/v3"
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, limit):
        with pytest.raises(ValueError):
            ViewerSettings(history={"limit": limit})

    def test_invalid_api_url(self):
        with pytest.raises(ValueError, match="http"):
            ViewerSettings(github={"api_url": "ftp://example.com"})

    def test_blank_token_is_unset(self):
        assert ViewerSettings(github={"token": "   "}).github.token is None


class TestFromYaml:
    """Test YAML loading with environment interpolation."""

    def test_load_yaml(self, tmp_path):
        config = tmp_path / "file-prs.yaml"
        config.write_text(
            "github:\n"
            "  token: '@keyring:file-pr-viewer/github_token'\n"
            "  retry_attempts: 3\n"
            "history:\n"
            "  limit: 50\n"
            "resolver:\n"
            "  max_concurrency: 8\n"
        )

        settings = ViewerSettings.from_yaml(config)

        assert settings.github.token == "@keyring:file-pr-viewer/github_token"
        assert settings.github.retry_attempts == 3
        assert settings.history.limit == 50
        assert settings.resolver.max_concurrency == 8

    def test_env_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_GH_TOKEN", "ghp_from_env")
        config = tmp_path / "config.yaml"
        config.write_text(
            "# token: ${NOT_SET_ANYWHERE}\n"
            "github:\n"
            "  token: ${TEST_GH_TOKEN}\n"
            "history:\n"
            "  remote_name: ${TEST_REMOTE_NAME:-upstream}\n"
        )

        settings = ViewerSettings.from_yaml(config)

        assert settings.github.token == "ghp_from_env"
        assert settings.history.remote_name == "upstream"

    def test_missing_env_var(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TEST_MISSING_VAR", raising=False)
        config = tmp_path / "config.yaml"
        config.write_text("github:\n  token: ${TEST_MISSING_VAR}\n")

        with pytest.raises(ConfigurationError, match="TEST_MISSING_VAR"):
            ViewerSettings.from_yaml(config)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ViewerSettings.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("github: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ViewerSettings.from_yaml(config)

    def test_non_mapping(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="YAML object"):
            ViewerSettings.from_yaml(config)

    def test_empty_file_gives_defaults(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("")

        assert ViewerSettings.from_yaml(config).history.limit == 25

    def test_validation_error_wrapped(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("history:\n  limit: 0\n")

        with pytest.raises(ConfigurationError, match="Failed to validate"):
            ViewerSettings.from_yaml(config)


class TestLoad:
    def test_explicit_path(self, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("log_level: warning\n")

        assert ViewerSettings.load(config).log_level == "WARNING"

    def test_default_location_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".file-prs.yaml").write_text("history:\n  limit: 7\n")
        monkeypatch.chdir(tmp_path)

        assert ViewerSettings.load().history.limit == 7

    def test_no_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("file_pr_viewer.config.settings.DEFAULT_CONFIG_PATHS", ())

        assert ViewerSettings.load().history.limit == 25
