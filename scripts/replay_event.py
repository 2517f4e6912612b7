"""Post a fake Slack message event to a running AsyncBrief API."""
import asyncio
import argparse
import httpx
import json
import time

URL = "http://localhost:8000/ingest"

async def send_event(url: str, channel: str, user: str, text: str):
    now = time.time()
    payload = {
        "type": "event_callback",
        "event": {
            "type": "message",
            "channel": channel,
            "user": user,
            "text": text,
            "ts": f"{now:.6f}",
            "event_ts": f"{now:.6f}"
        }
    }

    async with httpx.AsyncClient() as client:
        print(f"Sending event to {url}...")
        resp = await client.post(url, content=json.dumps(payload), headers={"Content-Type": "application/json"})
        print(f"Status: {resp.status_code}")
        print(f"Response: {resp.text}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("text", nargs="?", default="I'll try to get it done soon")
    parser.add_argument("--url", default=URL)
    parser.add_argument("--channel", default="C_LOCAL")
    parser.add_argument("--user", default="U12345")
    args = parser.parse_args()
    asyncio.run(send_event(args.url, args.channel, args.user, args.text))
