"""
Domain Models - conversation context

Immutable value objects describing what is sent upstream for one request:
the fixed system instructions, the prior turns, and the new user turn.

Pattern: Domain models as value objects (Percival & Gregory pp. 59-65)
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

# Appended after the persona instructions; the English-only output check
# enforces the same rule after generation.
LANGUAGE_POLICY = """
LANGUAGE POLICY (STRICT):

- All responses must be written entirely in English.
- Never mix French and English in the same response.
- French academic titles may appear as official names only.
- All explanations must remain strictly in English.
"""


class ConversationTurn(BaseModel):
    """
    One role-tagged message.

    Attributes:
        role: Author of the turn.
        content: Text of the turn.
    """

    role: Literal["system", "user", "assistant"]
    content: str

    model_config = {"frozen": True}


class ConversationContext(BaseModel):
    """
    Ordered, immutable sequence of turns sent to the upstream service.

    Built fresh for each inbound request and owned by that request only.
    """

    turns: tuple[ConversationTurn, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @classmethod
    def build(
        cls,
        message: str,
        history: list[ConversationTurn] | None = None,
        instructions: tuple[str, ...] = (),
    ) -> "ConversationContext":
        """
        Assemble instructions, prior turns and the new user message.

        Args:
            message: The new user message.
            history: Prior turns, oldest first.
            instructions: System instruction blocks, in order.

        Returns:
            A new ConversationContext.
        """
        turns = [ConversationTurn(role="system", content=text) for text in instructions]
        turns.extend(history or [])
        turns.append(ConversationTurn(role="user", content=message))
        return cls(turns=tuple(turns))

    def to_messages(self) -> list[dict[str, Any]]:
        """Render the turns in chat-completion message format."""
        return [{"role": turn.role, "content": turn.content} for turn in self.turns]

    def __len__(self) -> int:
        return len(self.turns)
