from typing import Optional
from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    """One stored Slack message. Fields are copied verbatim from the event."""
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    text: Optional[str] = None
    user: Optional[str] = None
    ts: Optional[str] = None
    channel: Optional[str] = None
