"""
Tests for core configuration module.

Reference:
- GUIDELINES: Sinha pp. 193-195 - Pydantic BaseSettings pattern

Environment variables are cleared per test so the host environment cannot
leak credentials into assertions.
"""

import pytest
from pydantic import SecretStr, ValidationError

from src.core.config import DEFAULT_ENDPOINT, DEFAULT_MODEL, Settings, get_settings

ENV_VARS = [
    "GITHUB_TOKEN1",
    "GITHUB_TOKEN2",
    "PORT",
    "LLM_RELAY_PORT",
    "LLM_RELAY_GITHUB_TOKEN1",
    "LLM_RELAY_GITHUB_TOKEN2",
    "LLM_RELAY_EXTRA_TOKENS",
    "LLM_RELAY_COOLDOWN_SECONDS",
    "LLM_RELAY_ENDPOINT",
    "LLM_RELAY_LOG_LEVEL",
    "LLM_RELAY_ENVIRONMENT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.service_name == "llm-relay"
        assert settings.port == 5000
        assert settings.endpoint == DEFAULT_ENDPOINT
        assert settings.model == DEFAULT_MODEL
        assert settings.temperature == 0.2
        assert settings.max_tokens == 600
        assert settings.cooldown_seconds == 30.0
        assert settings.output_policy == "english_only"
        assert settings.provider == "github_models"

    def test_no_credentials_by_default(self) -> None:
        assert Settings(_env_file=None).credentials() == []


class TestEnvironmentLoading:
    """Tests for loading from environment variables."""

    def test_historical_token_names(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN1", "tok-a")
        monkeypatch.setenv("GITHUB_TOKEN2", "tok-b")

        creds = Settings(_env_file=None).credentials()

        assert [c.get_secret_value() for c in creds] == ["tok-a", "tok-b"]

    def test_prefixed_token_names(self, monkeypatch) -> None:
        monkeypatch.setenv("LLM_RELAY_GITHUB_TOKEN2", "tok-b")

        creds = Settings(_env_file=None).credentials()

        assert [c.get_secret_value() for c in creds] == ["tok-b"]

    def test_port_from_plain_port(self, monkeypatch) -> None:
        monkeypatch.setenv("PORT", "8080")
        assert Settings(_env_file=None).port == 8080

    def test_prefixed_setting(self, monkeypatch) -> None:
        monkeypatch.setenv("LLM_RELAY_COOLDOWN_SECONDS", "45")
        assert Settings(_env_file=None).cooldown_seconds == 45.0

    def test_extra_tokens_follow_named_tokens(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN1", "tok-a")
        monkeypatch.setenv("LLM_RELAY_EXTRA_TOKENS", "tok-c, ,tok-d")

        creds = Settings(_env_file=None).credentials()

        assert [c.get_secret_value() for c in creds] == ["tok-a", "tok-c", "tok-d"]


class TestCredentials:
    """Tests for credentials()."""

    def test_blank_primary_is_skipped(self) -> None:
        settings = Settings(_env_file=None, github_token1="  ", github_token2="tok-b")
        assert [c.get_secret_value() for c in settings.credentials()] == ["tok-b"]

    def test_whitespace_is_stripped(self) -> None:
        settings = Settings(_env_file=None, github_token1=" tok-a\n")
        assert settings.credentials()[0].get_secret_value() == "tok-a"

    def test_values_are_secret(self) -> None:
        settings = Settings(_env_file=None, github_token1="tok-hidden")

        assert isinstance(settings.github_token1, SecretStr)
        assert "tok-hidden" not in repr(settings)
        assert "tok-hidden" not in str(settings.credentials())


class TestValidation:
    """Tests for field validators."""

    def test_endpoint_must_be_http(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, endpoint="ftp://models.example")

    def test_endpoint_trailing_slash_removed(self) -> None:
        settings = Settings(_env_file=None, endpoint="https://models.example/inference/")
        assert settings.endpoint == "https://models.example/inference"

    def test_log_level_normalized(self) -> None:
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_cooldown_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cooldown_seconds=0)

    def test_unknown_output_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_policy="french_only")


class TestCorsOrigins:
    def test_development_allows_all(self) -> None:
        assert Settings(_env_file=None, environment="development").get_cors_origins() == ["*"]

    def test_production_uses_configured_list(self) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            cors_origins="https://a.example, https://b.example",
        )
        assert settings.get_cors_origins() == ["https://a.example", "https://b.example"]


class TestGetSettings:
    def test_returns_cached_instance(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
