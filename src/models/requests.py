"""
Request Models - inbound generate-reply payload

The payload is parsed leniently: a missing or malformed message is reported
as a client error by the route with a fixed body rather than a 422, and a
malformed history degrades to fewer turns instead of rejecting the request.

Anti-Patterns Avoided:
- §1.1: Optional fields use Optional[T] with explicit None default
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from src.core.exceptions import GatewayValidationError
from src.models.domain import ConversationTurn

NO_MESSAGE_TEXT = "No message provided."


class HistoryEntry(BaseModel):
    """
    One prior turn as sent by the chat widget.

    Attributes:
        sender: "user" for the visitor, anything else for the assistant.
        text: The turn's text.
    """

    sender: Optional[str] = None
    text: str

    def to_turn(self) -> ConversationTurn:
        """Map the widget's sender naming to a conversation role."""
        role = "user" if self.sender == "user" else "assistant"
        return ConversationTurn(role=role, content=self.text)


class GenerateReplyRequest(BaseModel):
    """
    Generate-reply request.

    Fields are typed as Any so that type errors surface through
    validated_message() with the fixed client-error body.
    """

    message: Optional[Any] = Field(default=None, description="New user message")
    history: Optional[Any] = Field(default=None, description="Prior turns, oldest first")

    model_config = {"extra": "ignore"}

    def validated_message(self) -> str:
        """
        Return the message, or raise if it is missing, non-string or empty.

        Raises:
            GatewayValidationError: If the message is unusable.
        """
        if not isinstance(self.message, str) or not self.message:
            raise GatewayValidationError(NO_MESSAGE_TEXT, field="message")
        return self.message

    def history_turns(self) -> list[ConversationTurn]:
        """
        Convert the history into conversation turns.

        A non-list history counts as empty. Entries that are not objects or
        whose text is not a string are skipped.
        """
        if not isinstance(self.history, list):
            return []

        turns: list[ConversationTurn] = []
        for raw in self.history:
            if not isinstance(raw, dict) or not isinstance(raw.get("text"), str):
                continue
            sender = raw.get("sender")
            entry = HistoryEntry(
                sender=sender if isinstance(sender, str) else None,
                text=raw["text"],
            )
            turns.append(entry.to_turn())
        return turns
