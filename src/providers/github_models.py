"""
GitHub Models Provider - OpenAI-compatible chat completion adapter

GitHub Models exposes an OpenAI-compatible /chat/completions endpoint, so the
adapter drives it with the OpenAI SDK pointed at the GitHub Models base URL.

Design Patterns:
- Ports and Adapters: GitHubModelsClient implements ChatCompletionClient
- One SDK client per credential, created lazily and reused

SDK retries are disabled: the failover controller decides when and where to
retry, and a hidden SDK retry would double the worst-case latency per
credential.
"""

from typing import Any

import httpx
from openai import AsyncOpenAI

from src.core.config import DEFAULT_ENDPOINT
from src.providers.base import ChatCompletionClient


class GitHubModelsClient(ChatCompletionClient):
    """
    GitHub Models adapter backed by AsyncOpenAI.

    Args:
        base_url: Endpoint of the OpenAI-compatible service.
        timeout_seconds: Per-call timeout.

    Example:
        >>> client = GitHubModelsClient()
        >>> response = await client.complete(
        ...     token, messages, model="openai/gpt-4o-mini", temperature=0.2, max_tokens=600
        ... )
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ENDPOINT,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._base_url = base_url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._clients: dict[str, AsyncOpenAI] = {}

    def __repr__(self) -> str:
        return f"GitHubModelsClient(base_url={self._base_url!r}, clients={len(self._clients)})"

    def _client_for(self, credential: str) -> AsyncOpenAI:
        client = self._clients.get(credential)
        if client is None:
            client = AsyncOpenAI(
                api_key=credential,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
            self._clients[credential] = client
        return client

    async def complete(
        self,
        credential: str,
        messages: list[dict[str, Any]],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> Any:
        """Send one non-streaming chat completion request."""
        client = self._client_for(credential)
        return await client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=False,
        )

    async def aclose(self) -> None:
        """Close every SDK client opened so far."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()
