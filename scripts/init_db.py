from asyncbrief.store.db import init_db
from asyncbrief.config import get_settings
import logging

logging.basicConfig(level=logging.INFO)

if __name__ == "__main__":
    logging.info(f"Initializing database at {get_settings().DB_PATH}...")
    init_db()
    logging.info("Database initialized.")
