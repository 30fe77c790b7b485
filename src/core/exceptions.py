"""
Custom exceptions for the LLM Relay.

This module provides a hierarchy of custom exceptions for the relay service.
All exceptions inherit from RelayException and include error codes for
consistent error handling and API responses.

Reference:
- GUIDELINES: Specific exceptions, always capture with 'as e'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for relay exceptions.

    These codes provide a consistent way to identify error types
    across the API and in logging.
    """

    RELAY_ERROR = "RELAY_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    EXHAUSTED = "EXHAUSTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Normalized Upstream Error
# =============================================================================


@dataclass(frozen=True)
class NormalizedError:
    """
    Vendor-neutral description of a failed upstream attempt.

    Attributes:
        message: Human-readable error message, scrubbed of credentials.
        code: Vendor code, HTTP status, or "unknown_error".
    """

    message: str
    code: str = "unknown_error"


# =============================================================================
# Base Exception
# =============================================================================


class RelayException(Exception):
    """
    Base exception for all relay errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.RELAY_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# UpstreamError
# =============================================================================


class UpstreamError(RelayException):
    """
    A single upstream attempt failed.

    Raised inside the executor only and converted to an attempt failure;
    it never reaches an HTTP response.

    Attributes:
        code: Normalized error code.
    """

    def __init__(
        self,
        message: str,
        code: str = "unknown_error",
        error_code: str = ErrorCode.UPSTREAM_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.code = code

    def normalized(self) -> NormalizedError:
        """Return the vendor-neutral form of this error."""
        return NormalizedError(message=self.message, code=self.code)


# =============================================================================
# ExhaustionError
# =============================================================================


class ExhaustionError(RelayException):
    """
    Every credential failed for the current request.

    The attempt detail is kept for server-side logging only. The API layer
    answers with a fixed generic body.

    Attributes:
        attempts: (credential index, normalized error) per failed attempt,
            in the order they were made.
    """

    def __init__(
        self,
        attempts: list[tuple[int, NormalizedError]],
        message: str = "All credentials failed",
        error_code: str = ErrorCode.EXHAUSTED,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.attempts = attempts

    @property
    def last_error(self) -> NormalizedError | None:
        """Most recent failure, or None if nothing was attempted."""
        return self.attempts[-1][1] if self.attempts else None


# =============================================================================
# GatewayValidationError
# =============================================================================


class GatewayValidationError(RelayException):
    """
    Exception for inbound request validation errors.

    Note: Named GatewayValidationError to avoid conflict with
    pydantic.ValidationError.

    Attributes:
        field: Name of the field that failed validation.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str = ErrorCode.VALIDATION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.field = field


# =============================================================================
# ConfigurationError
# =============================================================================


class ConfigurationError(RelayException):
    """Startup configuration is unusable (for example, no credentials)."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.CONFIGURATION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
