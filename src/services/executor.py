"""
Request Executor - one upstream attempt with one credential

Performs a single chat completion call, normalizes the outcome into an
explicit result variant, and updates exactly one credential's health record:
cleared on success, stamped on failure.

Failure conditions:
- transport / network failure (connection errors, timeouts)
- API errors returned by the service (rate limits, auth, 5xx)
- a structurally unexpected response (no choices, no message)
- a missing, non-string or empty reply body

The raw credential and the vendor exception never leave this module; callers
only ever see NormalizedError.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx
import openai

from src.core.exceptions import NormalizedError, UpstreamError
from src.models.domain import ConversationContext
from src.observability.logging import get_logger
from src.providers.base import ChatCompletionClient
from src.resilience import metrics
from src.resilience.credential_pool import CredentialPool

logger = get_logger(__name__)

REDACTED = "[REDACTED]"
UNKNOWN_ERROR = "unknown_error"


# =============================================================================
# Attempt Results
# =============================================================================


@dataclass(frozen=True)
class AttemptSuccess:
    """Upstream produced a usable reply."""

    text: str


@dataclass(frozen=True)
class AttemptFailure:
    """Upstream attempt failed; error is already normalized."""

    error: NormalizedError


AttemptResult = Union[AttemptSuccess, AttemptFailure]


# =============================================================================
# Executor
# =============================================================================


class RequestExecutor:
    """
    Issues one upstream call per execute() using a pool credential.

    Args:
        pool: Credential pool whose health records are updated.
        client: Upstream chat completion adapter.
        model: Fixed model identifier.
        temperature: Fixed sampling temperature.
        max_tokens: Fixed output length cap.
    """

    def __init__(
        self,
        pool: CredentialPool,
        client: ChatCompletionClient,
        model: str,
        temperature: float = 0.2,
        max_tokens: int = 600,
    ) -> None:
        self._pool = pool
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def execute(self, index: int, context: ConversationContext) -> AttemptResult:
        """
        Attempt one completion with the credential at index.

        Args:
            index: Pool index of the credential to use.
            context: Conversation to send.

        Returns:
            AttemptSuccess with the reply text, or AttemptFailure.
        """
        credential = self._pool.credential(index)
        metrics.record_attempt(index)

        try:
            response = await self._client.complete(
                credential,
                context.to_messages(),
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
            text = extract_reply(response)
        except Exception as e:
            error = normalize_error(e, credential)
            self._pool.record_failure(index)
            metrics.record_failure(index, error.code)
            logger.warning(
                "upstream attempt failed",
                credential_index=index,
                code=error.code,
                error=error.message,
            )
            return AttemptFailure(error)

        self._pool.record_success(index)
        logger.debug("upstream attempt succeeded", credential_index=index)
        return AttemptSuccess(text)


# =============================================================================
# Response / Error Normalization
# =============================================================================


def extract_reply(response: Any) -> str:
    """
    Pull choices[0].message.content out of a completion.

    Raises:
        UpstreamError: If the response shape is unexpected or the reply is
            missing, non-string or empty.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise UpstreamError("Unexpected response: no choices", code="unexpected_response")

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content:
        raise UpstreamError("Empty or unexpected reply shape", code="empty_reply")
    return content


def normalize_error(exc: Exception, credential: Optional[str] = None) -> NormalizedError:
    """
    Convert any attempt failure into a NormalizedError.

    Code precedence: the vendor's error code, then the HTTP status, then a
    transport category, then "unknown_error".

    Args:
        exc: The exception raised during the attempt.
        credential: Secret to scrub from the message, if known.

    Returns:
        NormalizedError safe to log.
    """
    if isinstance(exc, UpstreamError):
        error = exc.normalized()
    else:
        error = NormalizedError(message=str(exc) or type(exc).__name__, code=_error_code(exc))

    if credential and credential in error.message:
        error = NormalizedError(message=error.message.replace(credential, REDACTED), code=error.code)
    return error


def _error_code(exc: Exception) -> str:
    # APITimeoutError subclasses APIConnectionError, so it is checked first
    if isinstance(exc, openai.APITimeoutError):
        return "timeout"
    if isinstance(exc, openai.APIConnectionError):
        return "connection_error"
    if isinstance(exc, openai.APIStatusError):
        return str(exc.code or exc.status_code)
    if isinstance(exc, openai.APIError):
        return str(exc.code or "api_error")
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    if isinstance(exc, httpx.HTTPError):
        return "transport_error"

    code = getattr(exc, "code", None) or getattr(exc, "status", None)
    return str(code) if code else UNKNOWN_ERROR
