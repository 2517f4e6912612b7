from typing import Dict, Any, Optional
from pydantic import ValidationError
from ..schemas.messages import ChatMessage
from ..log import get_logger

logger = get_logger("parse")

def is_url_verification(payload: Dict[str, Any]) -> bool:
    return payload.get("type") == "url_verification"

def parse_event(payload: Dict[str, Any]) -> Optional[ChatMessage]:
    """
    Parse a Slack Events API payload.
    Returns a ChatMessage for message events, else None.
    Fields are copied as-is; no channel, bot or subtype filtering.
    """
    event = payload.get("event")
    if not isinstance(event, dict):
        return None

    if event.get("type") != "message":
        return None

    try:
        return ChatMessage(
            text=event.get("text"),
            user=event.get("user"),
            ts=event.get("ts"),
            channel=event.get("channel"),
        )
    except ValidationError as e:
        logger.warning(f"Unusable message event: {e}")
        return None
