"""
Tests for RequestExecutor - single upstream attempt

This module tests:
- Success returns the reply text and clears the credential's record
- Every failure kind becomes an AttemptFailure and stamps the record
- Error normalization for OpenAI SDK and httpx errors
- Credential values never appear in normalized errors

Pattern: FakeChatClient test double (GUIDELINES pp. 157)
"""

from types import SimpleNamespace

import httpx
import openai
import pytest

from src.models.domain import ConversationContext
from src.providers.fake import make_completion
from src.services.executor import (
    AttemptFailure,
    AttemptSuccess,
    extract_reply,
    normalize_error,
)


@pytest.fixture
def context() -> ConversationContext:
    return ConversationContext.build("What does the owner work on?", instructions=("Be brief.",))


def _request() -> httpx.Request:
    return httpx.Request("POST", "https://models.github.ai/inference/chat/completions")


def _status_error(status: int, body: dict | None = None) -> openai.APIStatusError:
    response = httpx.Response(status, request=_request(), json=body or {})
    cls = {401: openai.AuthenticationError, 429: openai.RateLimitError}.get(
        status, openai.InternalServerError
    )
    return cls(f"Error code: {status}", response=response, body=body)


# =============================================================================
# Execute
# =============================================================================


class TestExecuteSuccess:
    """Successful attempts."""

    @pytest.mark.asyncio
    async def test_returns_reply_text(self, executor, fake_client, tokens, context) -> None:
        fake_client.queue(tokens[0], "The owner builds backend systems.")

        result = await executor.execute(0, context)

        assert result == AttemptSuccess("The owner builds backend systems.")

    @pytest.mark.asyncio
    async def test_uses_credential_at_index(self, executor, fake_client, tokens, context) -> None:
        await executor.execute(1, context)

        assert fake_client.calls_for(tokens[1]) == 1
        assert fake_client.calls_for(tokens[0]) == 0

    @pytest.mark.asyncio
    async def test_sends_full_context(self, executor, fake_client, context) -> None:
        await executor.execute(0, context)

        _, messages = fake_client.calls[0]
        assert messages == context.to_messages()

    @pytest.mark.asyncio
    async def test_clears_previous_failure(self, executor, pool, clock, context) -> None:
        pool.record_failure(0)

        await executor.execute(0, context)

        assert pool.last_failure_time(0) is None
        assert pool.is_cooling_down(0, clock.now) is False

    @pytest.mark.asyncio
    async def test_leaves_other_credentials_alone(self, executor, pool, context) -> None:
        pool.record_failure(1, now=900.0)

        await executor.execute(0, context)

        assert pool.last_failure_time(1) == 900.0


class TestExecuteFailure:
    """Failed attempts."""

    @pytest.mark.asyncio
    async def test_exception_becomes_failure(self, executor, fake_client, tokens, context) -> None:
        fake_client.queue(tokens[0], _status_error(429))

        result = await executor.execute(0, context)

        assert isinstance(result, AttemptFailure)
        assert result.error.code == "429"

    @pytest.mark.asyncio
    async def test_failure_stamps_clock_time(
        self, executor, fake_client, pool, clock, tokens, context
    ) -> None:
        fake_client.queue(tokens[1], ConnectionError("reset by peer"))

        await executor.execute(1, context)

        assert pool.last_failure_time(1) == clock.now
        assert pool.last_failure_time(0) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "outcome, code",
        [
            (make_completion(""), "empty_reply"),
            (make_completion(None), "empty_reply"),
            (make_completion(42), "empty_reply"),
            (SimpleNamespace(choices=[]), "unexpected_response"),
            (SimpleNamespace(), "unexpected_response"),
        ],
    )
    async def test_malformed_reply_is_failure(
        self, executor, fake_client, pool, tokens, context, outcome, code
    ) -> None:
        fake_client.queue(tokens[0], outcome)

        result = await executor.execute(0, context)

        assert isinstance(result, AttemptFailure)
        assert result.error.code == code
        assert pool.last_failure_time(0) is not None

    @pytest.mark.asyncio
    async def test_failure_is_logged_without_credential(
        self, executor, fake_client, tokens, context, log_stream
    ) -> None:
        fake_client.queue(tokens[0], RuntimeError(f"bad credentials {tokens[0]}"))

        await executor.execute(0, context)

        output = log_stream.getvalue()
        assert "upstream attempt failed" in output
        assert '"credential_index": 0' in output
        assert tokens[0] not in output


# =============================================================================
# Reply Extraction
# =============================================================================


class TestExtractReply:
    """Tests for extract_reply()."""

    def test_returns_content(self) -> None:
        assert extract_reply(make_completion("hi")) == "hi"

    def test_missing_message(self) -> None:
        from src.core.exceptions import UpstreamError

        response = SimpleNamespace(choices=[SimpleNamespace(index=0)])
        with pytest.raises(UpstreamError) as exc_info:
            extract_reply(response)
        assert exc_info.value.code == "empty_reply"


# =============================================================================
# Error Normalization
# =============================================================================


class TestNormalizeError:
    """Tests for normalize_error()."""

    def test_status_code_used_when_no_vendor_code(self) -> None:
        assert normalize_error(_status_error(500)).code == "500"

    def test_vendor_code_preferred_over_status(self) -> None:
        error = _status_error(401, {"code": "unauthorized", "message": "Bad credentials"})
        assert normalize_error(error).code == "unauthorized"

    def test_sdk_timeout(self) -> None:
        assert normalize_error(openai.APITimeoutError(request=_request())).code == "timeout"

    def test_sdk_connection_error(self) -> None:
        error = openai.APIConnectionError(request=_request())
        assert normalize_error(error).code == "connection_error"

    def test_httpx_timeout(self) -> None:
        assert normalize_error(httpx.ReadTimeout("slow")).code == "timeout"

    def test_httpx_transport_error(self) -> None:
        assert normalize_error(httpx.ConnectError("refused")).code == "transport_error"

    def test_generic_exception(self) -> None:
        error = normalize_error(ValueError("boom"))
        assert error.code == "unknown_error"
        assert error.message == "boom"

    def test_exception_without_message_uses_type_name(self) -> None:
        assert normalize_error(RuntimeError()).message == "RuntimeError"

    def test_code_attribute_is_honoured(self) -> None:
        exc = RuntimeError("quota")
        exc.code = "rate_limited"
        assert normalize_error(exc).code == "rate_limited"

    def test_credential_is_redacted(self) -> None:
        error = normalize_error(RuntimeError("token sk-secret-123 rejected"), "sk-secret-123")
        assert "sk-secret-123" not in error.message
        assert "[REDACTED]" in error.message
