"""
Provider Base Interface - upstream chat completion port

This module defines the abstract base class for upstream chat completion
clients. The relay authenticates each call with the credential chosen by the
failover controller, so the credential is a per-call argument rather than a
constructor argument.

Design Pattern:
- Ports and Adapters (Hexagonal Architecture)
- ChatCompletionClient serves as the "port" (interface)
- GitHubModelsClient and FakeChatClient serve as "adapters"
"""

from abc import ABC, abstractmethod
from typing import Any


class ChatCompletionClient(ABC):
    """
    Abstract base class for upstream chat completion adapters.

    Implementations return the provider's raw completion object; shape checks
    and error normalization happen in the RequestExecutor so every adapter is
    held to the same contract.
    """

    @abstractmethod
    async def complete(
        self,
        credential: str,
        messages: list[dict[str, Any]],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> Any:
        """
        Issue one chat completion call.

        Args:
            credential: Secret used to authenticate this call only.
            messages: Role-tagged messages, oldest first.
            model: Model identifier.
            temperature: Sampling temperature.
            max_tokens: Output length cap.

        Returns:
            The raw completion, expected to expose choices[0].message.content.

        Raises:
            Exception: Any transport or API error; callers normalize it.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled connections. Default: nothing to release."""
        return None
