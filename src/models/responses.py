"""
Response Models - generate-reply and error bodies

Every outcome of the generate-reply operation uses the same {"text": ...}
shape so the chat widget can render it directly.
"""

from pydantic import BaseModel

EXHAUSTED_TEXT = "AI service unavailable (all tokens failed)."


class ReplyResponse(BaseModel):
    """Generated reply, or a fixed client-facing error text."""

    text: str
