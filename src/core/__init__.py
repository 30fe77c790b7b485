"""
Core module for the LLM Relay.

This module contains configuration, exceptions, and shared utilities.
"""

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    ConfigurationError,
    ErrorCode,
    ExhaustionError,
    GatewayValidationError,
    NormalizedError,
    RelayException,
    UpstreamError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "NormalizedError",
    "RelayException",
    "UpstreamError",
    "ExhaustionError",
    "GatewayValidationError",
    "ConfigurationError",
]
