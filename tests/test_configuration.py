"""Test configuration models and environment variable loading."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from apim_cli.configuration import (
    DEFAULT_URL,
    ManagementApiConfig,
    load_environment_variables,
)


class TestManagementApiConfig:
    """Test validation and defaults of ManagementApiConfig."""

    def test_defaults(self):
        config = ManagementApiConfig()

        assert config.url == DEFAULT_URL
        assert config.organization == "DEFAULT"
        assert config.environment == "DEFAULT"
        assert config.timeout == 10.0
        assert config.verify_ssl is True
        assert config.base_url == (
            "http://localhost:8083/management/organizations/DEFAULT/environments/DEFAULT"
        )

    def test_trailing_slash_stripped(self):
        config = ManagementApiConfig(url="https://apim.example.com/management//")
        assert config.url == "https://apim.example.com/management"

    def test_rejects_non_http_url(self):
        with pytest.raises(ValidationError):
            ManagementApiConfig(url="ftp://apim.example.com")

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            ManagementApiConfig(timeout=0)

    def test_rejects_empty_environment(self):
        with pytest.raises(ValidationError):
            ManagementApiConfig(environment="")


class TestFromEnv:
    """Test binding of APIM_* variables."""

    def test_reads_environment(self, clean_env):
        env = {
            "APIM_URL": "https://apim.example.com/management",
            "APIM_ORGANIZATION": "ACME",
            "APIM_ENVIRONMENT": "PROD",
            "APIM_TIMEOUT": "2.5",
            "APIM_VERIFY_SSL": "false",
        }
        with patch.dict(os.environ, env):
            config = ManagementApiConfig.from_env()

        assert config.url == "https://apim.example.com/management"
        assert config.organization == "ACME"
        assert config.environment == "PROD"
        assert config.timeout == 2.5
        assert config.verify_ssl is False

    def test_overrides_win_and_none_is_ignored(self, clean_env):
        with patch.dict(os.environ, {"APIM_ENVIRONMENT": "PROD", "APIM_ORGANIZATION": "ACME"}):
            config = ManagementApiConfig.from_env(environment="UAT", organization=None)

        assert config.environment == "UAT"
        assert config.organization == "ACME"

    def test_empty_variables_fall_back_to_defaults(self, clean_env):
        with patch.dict(os.environ, {"APIM_URL": "", "APIM_VERIFY_SSL": ""}):
            config = ManagementApiConfig.from_env()

        assert config.url == DEFAULT_URL
        assert config.verify_ssl is True

    def test_invalid_timeout(self, clean_env):
        with patch.dict(os.environ, {"APIM_TIMEOUT": "soon"}):
            with pytest.raises(ValidationError):
                ManagementApiConfig.from_env()


class TestEnvironmentLoading:
    """Test .env loading precedence."""

    def test_loads_project_env(self, clean_env):
        (clean_env / ".env").write_text("APIM_ENVIRONMENT=FROM_DOTENV\n")

        with patch.dict(os.environ, {}, clear=False):
            loaded = load_environment_variables()
            assert os.getenv("APIM_ENVIRONMENT") == "FROM_DOTENV"

        assert loaded == [str(clean_env / ".env")]

    def test_existing_variables_preserved(self, clean_env):
        (clean_env / ".env").write_text("APIM_ENVIRONMENT=FROM_DOTENV\n")

        with patch.dict(os.environ, {"APIM_ENVIRONMENT": "EXISTING"}):
            load_environment_variables()
            assert os.getenv("APIM_ENVIRONMENT") == "EXISTING"

    def test_explicit_file_takes_precedence(self, clean_env):
        (clean_env / ".env").write_text("APIM_ENVIRONMENT=PROJECT\nAPIM_ORGANIZATION=PROJECT_ORG\n")
        explicit = clean_env / "prod.env"
        explicit.write_text("APIM_ENVIRONMENT=EXPLICIT\n")

        with patch.dict(os.environ, {}, clear=False):
            loaded = load_environment_variables(explicit)
            assert os.getenv("APIM_ENVIRONMENT") == "EXPLICIT"
            assert os.getenv("APIM_ORGANIZATION") == "PROJECT_ORG"

        assert loaded == [str(explicit), str(clean_env / ".env")]

    def test_missing_explicit_file(self, clean_env):
        assert load_environment_variables(clean_env / "missing.env") == []
