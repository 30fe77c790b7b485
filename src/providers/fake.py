"""
Fake Chat Client - Test Double Implementation

This module provides a FakeChatClient that implements the real
ChatCompletionClient interface without making network calls.

Pattern: Test Doubles using duck typing (GUIDELINES pp. 157)
"Python's duck typing enables test doubles without complex mocking frameworks"

The fake can also serve local development without credentials that reach a
real service (LLM_RELAY_PROVIDER=fake).
"""

from collections import deque
from types import SimpleNamespace
from typing import Any, Iterable, Optional

from src.providers.base import ChatCompletionClient


def make_completion(content: Any) -> SimpleNamespace:
    """Build an object shaped like an OpenAI chat completion."""
    message = SimpleNamespace(role="assistant", content=content)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeChatClient(ChatCompletionClient):
    """
    Scripted upstream for tests and local development.

    Each credential has its own queue of outcomes. An outcome is consumed per
    call and is one of:
        str        -> a completion whose content is that string
        Exception  -> raised from complete()
        other      -> returned as-is (for malformed-response tests)
    When a credential's queue is empty the default reply is used.

    Attributes:
        calls: (credential, messages) per call, in call order.

    Example:
        >>> fake = FakeChatClient(script={"tok-a": [ConnectionError("down")]})
        >>> await fake.complete("tok-a", messages, model="m", temperature=0, max_tokens=1)
        Traceback (most recent call last):
        ConnectionError: down
    """

    def __init__(
        self,
        script: Optional[dict[str, Iterable[Any]]] = None,
        default_reply: Optional[str] = None,
    ) -> None:
        self._script: dict[str, deque[Any]] = {
            credential: deque(outcomes) for credential, outcomes in (script or {}).items()
        }
        self._default_reply = default_reply
        self.calls: list[tuple[str, list[dict[str, Any]]]] = []

    def queue(self, credential: str, *outcomes: Any) -> None:
        """Append outcomes to a credential's script."""
        self._script.setdefault(credential, deque()).extend(outcomes)

    def calls_for(self, credential: str) -> int:
        """Number of calls made with the given credential."""
        return sum(1 for used, _ in self.calls if used == credential)

    async def complete(
        self,
        credential: str,
        messages: list[dict[str, Any]],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> Any:
        self.calls.append((credential, list(messages)))

        pending = self._script.get(credential)
        if pending:
            outcome = pending.popleft()
        else:
            outcome = self._default_reply or self._echo(messages)

        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, str):
            return make_completion(outcome)
        return outcome

    def _echo(self, messages: list[dict[str, Any]]) -> str:
        for msg in reversed(messages):
            if msg.get("role") == "user" and msg.get("content"):
                return f"This is a fake reply to: {msg['content'][:50]}"
        return "This is a fake reply from the LLM Relay."
