"""SQLite database connection and schema management.

Provides get_db_connection() context manager and init_db() for schema creation.
Stores the append-only messages table fed by the Slack ingestion endpoint.
"""

import sqlite3
from ..config import get_settings
from contextlib import contextmanager

settings = get_settings()

@contextmanager
def get_db_connection():
    conn = sqlite3.connect(settings.DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    # No UNIQUE(channel_id, message_ts): re-delivered events are stored again.
    schema = """
    CREATE TABLE IF NOT EXISTS messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        channel_id TEXT,
        message_ts TEXT,
        user_id TEXT,
        text TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );

    CREATE INDEX IF NOT EXISTS idx_messages_ts ON messages(message_ts);
    """
    with get_db_connection() as conn:
        conn.executescript(schema)
        conn.commit()
