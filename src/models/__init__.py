"""Models Package - domain value objects and API request/response models."""

from src.models.domain import LANGUAGE_POLICY, ConversationContext, ConversationTurn
from src.models.requests import NO_MESSAGE_TEXT, GenerateReplyRequest, HistoryEntry
from src.models.responses import EXHAUSTED_TEXT, ReplyResponse

__all__ = [
    "LANGUAGE_POLICY",
    "ConversationContext",
    "ConversationTurn",
    "GenerateReplyRequest",
    "HistoryEntry",
    "NO_MESSAGE_TEXT",
    "EXHAUSTED_TEXT",
    "ReplyResponse",
]
