"""
Vapi.ai tool-call plumbing.

Vapi posts tool arguments either flat in the body, inside
``message.toolCalls[0].function.arguments`` (an object or a JSON string) or
under ``parameters``. Replies must echo the tool call id and carry the result
as a JSON string.
"""

import hmac
import json
import logging
from typing import Any, Optional

from fastapi import Header

from ...config import VAPI_API_KEY
from ...errors import UnauthenticatedError

logger = logging.getLogger(__name__)


async def verify_vapi_secret(x_vapi_secret: Optional[str] = Header(None)) -> None:
    """Reject requests without the shared Vapi secret; unset secret rejects everything"""
    if not VAPI_API_KEY:
        logger.error("VAPI_API_KEY not configured, rejecting Vapi request")
        raise UnauthenticatedError("Invalid API key")
    if not x_vapi_secret or not hmac.compare_digest(
        x_vapi_secret.encode("utf-8"), VAPI_API_KEY.encode("utf-8")
    ):
        logger.warning("Vapi request with invalid secret")
        raise UnauthenticatedError("Invalid API key")


def _as_dict(value: Any) -> dict:
    if isinstance(value, dict):
        return value
    if isinstance(value, str) and value.strip():
        try:
            parsed = json.loads(value)
        except ValueError:
            logger.warning("Tool call arguments are not valid JSON")
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def extract_tool_call(body: dict, key_field: str = "craftsmanId") -> tuple[dict, Optional[str]]:
    """
    Find the tool arguments in any of the accepted payload shapes.

    Returns:
        Tuple of (arguments, tool_call_id)
    """
    if not isinstance(body, dict):
        return {}, None

    if body.get(key_field) is not None:
        return body, None

    tool_call_id = None
    message = body.get("message")
    tool_calls = message.get("toolCalls") if isinstance(message, dict) else None
    if isinstance(tool_calls, list) and tool_calls and isinstance(tool_calls[0], dict):
        tool_call = tool_calls[0]
        tool_call_id = tool_call.get("id")
        function = tool_call.get("function") or {}
        args = _as_dict(function.get("arguments"))
        if args.get(key_field) is not None:
            return args, tool_call_id

    params = _as_dict(body.get("parameters"))
    if params.get(key_field) is not None:
        return params, tool_call_id

    return body, tool_call_id


def tool_result(tool_call_id: Optional[str], result: dict) -> dict:
    return {"results": [{"toolCallId": tool_call_id, "result": json.dumps(result, default=str)}]}


def parse_int_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
