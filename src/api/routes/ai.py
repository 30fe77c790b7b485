"""
AI Router - generate-reply endpoint

POST /api/ai accepts {message, history} from the portfolio chat widget and
answers with {text}. All outcomes share that shape:

    200  {"text": "<reply>"}
    400  {"text": "No message provided."}                     (no upstream call)
    502  {"text": "AI service unavailable (all tokens failed)."}

Failure detail (credential index, upstream code and message) is logged
server-side only.

Anti-Patterns Avoided:
- ANTI_PATTERN_ANALYSIS §3.1: No bare except clauses
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.api.deps import get_failover_controller
from src.core.exceptions import ExhaustionError, GatewayValidationError
from src.models.requests import NO_MESSAGE_TEXT, GenerateReplyRequest
from src.models.responses import EXHAUSTED_TEXT, ReplyResponse
from src.services.failover import FailoverController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["AI"])


async def _parse_body(request: Request) -> GenerateReplyRequest:
    """Parse the JSON body; anything but an object counts as empty."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    return GenerateReplyRequest.model_validate(payload if isinstance(payload, dict) else {})


@router.post("/ai", response_model=ReplyResponse)
async def generate_reply(
    request: Request,
    controller: FailoverController = Depends(get_failover_controller),
) -> ReplyResponse | JSONResponse:
    """
    Generate a reply, failing over across credentials.

    Returns:
        ReplyResponse: The generated reply
        JSONResponse 400: Missing, non-string or empty message
        JSONResponse 502: Every credential failed
    """
    body = await _parse_body(request)

    try:
        message = body.validated_message()
        outcome = await controller.generate_reply(message, body.history_turns())
    except GatewayValidationError as e:
        logger.info(f"Rejected generate-reply request: field={e.field}")
        return JSONResponse(status_code=400, content={"text": NO_MESSAGE_TEXT})
    except ExhaustionError as e:
        logger.error(f"Generate-reply exhausted all credentials: attempts={len(e.attempts)}")
        return JSONResponse(status_code=502, content={"text": EXHAUSTED_TEXT})

    logger.debug(
        f"Generated reply: credential_index={outcome.credential_index} "
        f"attempts={outcome.attempts} regenerated={outcome.regenerated}"
    )
    return ReplyResponse(text=outcome.text)
