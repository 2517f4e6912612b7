#!/usr/bin/env python3
"""
Seed the message store with a channel's recent history.
Uses SLACK_BOT_TOKEN (needs the 'channels:history' scope).
"""
import argparse
import logging

from asyncbrief.log import setup_logging
from asyncbrief.store.db import init_db
from asyncbrief.store.repo import Repo
from asyncbrief.slack.client import SlackHistoryClient

setup_logging()
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("channel_id")
    parser.add_argument("--limit", type=int, default=50)
    args = parser.parse_args()

    init_db()
    messages = SlackHistoryClient().fetch_chat_messages(args.channel_id, limit=args.limit)
    for message in messages:
        Repo.append_message(message)
    logger.info(f"Appended {len(messages)} messages from {args.channel_id}")


if __name__ == "__main__":
    main()
