"""
Core configuration module for the LLM Relay.

This module provides centralized configuration management using Pydantic Settings.
Service options are loaded from environment variables with the LLM_RELAY_ prefix.
Upstream credentials keep their historical names (GITHUB_TOKEN1, GITHUB_TOKEN2)
so existing deployments keep working; PORT is honoured as well.

Reference:
- GUIDELINES: Sinha pp. 193-195 - Pydantic BaseSettings pattern
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

DEFAULT_ENDPOINT = "https://models.github.ai/inference"
DEFAULT_MODEL = "openai/gpt-4o-mini"

DEFAULT_SYSTEM_PROMPT = (
    "You are the official AI portfolio assistant of the site owner. "
    "You speak about the owner in the third person and present their academic "
    "background, technical projects, professional experience and long-term vision. "
    "Your tone is professional, structured, precise and technically rigorous."
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Example: LLM_RELAY_COOLDOWN_SECONDS=45
    """

    # =========================================================================
    # Service Configuration
    # =========================================================================
    service_name: str = Field(
        default="llm-relay",
        description="Name of the service for logging and identification",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("LLM_RELAY_PORT", "PORT", "port"),
        description="Port the service listens on",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated allowed origins outside development",
    )

    # =========================================================================
    # Upstream Credentials
    # SecretStr masks values in logs/repr, use .get_secret_value() to access
    # =========================================================================
    github_token1: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "GITHUB_TOKEN1", "LLM_RELAY_GITHUB_TOKEN1", "github_token1"
        ),
        description="Primary credential for the upstream service",
    )
    github_token2: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "GITHUB_TOKEN2", "LLM_RELAY_GITHUB_TOKEN2", "github_token2"
        ),
        description="Secondary credential for the upstream service",
    )
    extra_tokens: SecretStr = Field(
        default=SecretStr(""),
        description="Additional comma-separated credentials, tried after the named ones",
    )

    # =========================================================================
    # Upstream Request Parameters
    # =========================================================================
    provider: Literal["github_models", "fake"] = Field(
        default="github_models",
        description="Upstream adapter; 'fake' serves canned replies for local development",
    )
    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="Base URL of the OpenAI-compatible chat completion service",
    )
    model: str = Field(
        default=DEFAULT_MODEL,
        description="Model identifier sent with every request",
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature, kept low for near-deterministic output",
    )
    max_tokens: int = Field(
        default=600,
        gt=0,
        description="Output length cap per completion",
    )
    upstream_timeout_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=600.0,
        description="Timeout for a single upstream call",
    )

    # =========================================================================
    # Failover Configuration
    # =========================================================================
    cooldown_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=3600.0,
        description="Seconds a failed credential is deprioritized",
    )
    output_policy: Literal["english_only", "none"] = Field(
        default="english_only",
        description="Post-generation check that may trigger one regeneration",
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="Instructional text sent ahead of every conversation",
    )

    model_config = {
        "env_prefix": "LLM_RELAY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint URL scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def credentials(self) -> list[SecretStr]:
        """
        Ordered list of configured credentials, blanks dropped.

        Named tokens come first (GITHUB_TOKEN1, GITHUB_TOKEN2), followed by
        any extra tokens in the order they were listed.
        """
        ordered = [self.github_token1, self.github_token2]
        ordered.extend(
            SecretStr(token)
            for token in self.extra_tokens.get_secret_value().split(",")
        )
        return [
            SecretStr(token.get_secret_value().strip())
            for token in ordered
            if token.get_secret_value().strip()
        ]

    def get_cors_origins(self) -> list[str]:
        """
        CORS allowed origins for the current environment.

        Development allows every origin; elsewhere only the configured
        comma-separated list is allowed.
        """
        if self.environment == "development":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
