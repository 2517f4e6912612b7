"""Repository pattern for database operations.

The message log is append-only: rows are inserted by ingestion and read back
as windows of the most recent messages. Every sqlite3 error is re-raised as
StoreUnavailable so callers deal with a single failure type.
"""

import sqlite3
from typing import List
from .db import get_db_connection
from ..errors import StoreUnavailable
from ..schemas.messages import ChatMessage
import logging

logger = logging.getLogger("store")

class Repo:
    @staticmethod
    def append_message(message: ChatMessage) -> int:
        """Append one message. Returns the new row id."""
        try:
            with get_db_connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO messages (channel_id, message_ts, user_id, text)
                    VALUES (?, ?, ?, ?)
                    """,
                    (message.channel, message.ts, message.user, message.text)
                )
                conn.commit()
                return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"DB Error saving message {message.ts}: {e}")
            raise StoreUnavailable(str(e)) from e

    @staticmethod
    def recent_messages(limit: int, ascending: bool = True) -> List[ChatMessage]:
        """
        Return the `limit` most recent messages by ts.
        The window is always the newest rows; `ascending` only controls the
        order they are returned in.
        """
        try:
            with get_db_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT channel_id, message_ts, user_id, text
                    FROM messages
                    ORDER BY message_ts DESC, id DESC
                    LIMIT ?
                    """,
                    (limit,)
                ).fetchall()
        except sqlite3.Error as e:
            logger.error(f"DB Error reading messages: {e}")
            raise StoreUnavailable(str(e)) from e

        messages = [
            ChatMessage(
                channel=row["channel_id"],
                ts=row["message_ts"],
                user=row["user_id"],
                text=row["text"],
            )
            for row in rows
        ]
        if ascending:
            messages.reverse()
        return messages

    @staticmethod
    def count_messages() -> int:
        try:
            with get_db_connection() as conn:
                row = conn.execute("SELECT COUNT(*) AS n FROM messages").fetchone()
                return row["n"]
        except sqlite3.Error as e:
            raise StoreUnavailable(str(e)) from e
