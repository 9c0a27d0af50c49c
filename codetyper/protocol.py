"""Request/response contract between a code source and an editor host.

A host receives ``{"type": "TYPE_CODE", "code": ...}`` and answers exactly
once with one of the statuses below. Transport is the caller's business.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

TYPE_CODE = "TYPE_CODE"
CODE_FROM_REACT = "CODE_FROM_REACT"

# Reserved for hosts that append to an in-flight session; TypingScheduler
# rejects instead, but the relay still treats it as delivered
STATUS_QUEUED = "queued"
STATUS_SUCCESS = "success"
STATUS_BUSY = "busy"
STATUS_NOT_FOUND = "not_found"
STATUS_ERROR = "error"

STATUSES = frozenset(
    {STATUS_QUEUED, STATUS_SUCCESS, STATUS_BUSY, STATUS_NOT_FOUND, STATUS_ERROR}
)

logger = logging.getLogger(__name__)


def make_response(status: str, message: Optional[str] = None) -> Dict[str, Any]:
    if status not in STATUSES:
        raise ValueError(f"unknown status {status!r}")
    response: Dict[str, Any] = {"status": status}
    if message is not None:
        response["message"] = message
    return response


def make_request(code: str, type_: str = TYPE_CODE) -> Dict[str, Any]:
    return {"type": type_, "code": code}


async def handle_message(scheduler, message: Any) -> Dict[str, Any]:
    """Host side of TYPE_CODE: start a typing session on ``scheduler``."""
    logger.debug("Host received message: %r", message)
    if not isinstance(message, dict) or message.get("type") != TYPE_CODE:
        kind = message.get("type") if isinstance(message, dict) else type(message).__name__
        return make_response(STATUS_ERROR, f"unexpected message type: {kind!r}")
    code = message.get("code")
    if not isinstance(code, str):
        return make_response(STATUS_ERROR, "TYPE_CODE requires a string 'code'")
    try:
        return await scheduler.submit(code)
    except Exception as exc:
        logger.exception("Typing session failed to start")
        return make_response(STATUS_ERROR, str(exc) or type(exc).__name__)
