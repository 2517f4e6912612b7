from typing import List
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from ..config import get_settings
from ..log import get_logger
from .parse import parse_event

logger = get_logger("slack_client")
settings = get_settings()

class SlackHistoryClient:
    """Reads channel history so the store can be seeded outside the Events API."""

    def __init__(self, token: str = None):
        self.client = WebClient(token=token or settings.SLACK_BOT_TOKEN)

    def get_latest_messages(self, channel_id: str, limit: int = 50) -> List[dict]:
        """
        Reads the last few messages from a channel.
        Requires 'conversations.history' scope.
        """
        try:
            response = self.client.conversations_history(
                channel=channel_id,
                limit=limit
            )
            return response["messages"]
        except SlackApiError as e:
            logger.error(f"Error fetching history: {e.response['error']}")
            raise

    def fetch_chat_messages(self, channel_id: str, limit: int = 50):
        """
        History entries do not carry the channel, so it is filled in before
        they go through the same parser as live events. Oldest first.
        """
        raw = self.get_latest_messages(channel_id, limit=limit)
        messages = []
        for item in reversed(raw):
            event = {"type": "message", "channel": channel_id, **item}
            message = parse_event({"event": event})
            if message is not None:
                messages.append(message)
        return messages
