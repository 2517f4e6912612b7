import pytest
from fastapi.testclient import TestClient
from asyncbrief.main_api import app
from asyncbrief.store.repo import Repo
from asyncbrief.errors import StoreUnavailable
from unittest.mock import patch

client = TestClient(app)

def test_ingest_url_verification(test_db):
    """
    WHY: Slack requires a handshake (url_verification) to confirm we own the endpoint before sending events.
    HOW: Post a JSON payload with `type="url_verification"` and a challenge string.
    EXPECTED: Return HTTP 200, the exact challenge string, and store nothing.
    """
    challenge = "3eZbrw1aBm2rZgRNFdxV2595E9CY3gmdALWMmHkvFXO7tYXAYM8P"
    response = client.post("/ingest", json={
        "token": "Jhj5dZrVaK7ZwHHjRyZWjbDl",
        "type": "url_verification",
        "challenge": challenge
    })
    assert response.status_code == 200
    assert response.json() == {"challenge": challenge}
    assert Repo.count_messages() == 0

def test_ingest_message_event(test_db):
    """
    WHY: Every message event must end up in the store, fields copied verbatim.
    HOW: Post an `event_callback` payload with a `message` event.
    EXPECTED:
        1. Return HTTP 200 {"ok": true}.
        2. Exactly one row stored with the event's text/user/ts/channel.
    """
    payload = {
        "type": "event_callback",
        "event": {
            "type": "message",
            "channel": "C_TEST",
            "user": "U_USER",
            "text": "I'll try to get it done soon",
            "ts": "1722527938.123456"
        }
    }

    response = client.post("/ingest", json=payload)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    messages = Repo.recent_messages(10)
    assert len(messages) == 1
    stored = messages[0]
    assert stored.text == "I'll try to get it done soon"
    assert stored.user == "U_USER"
    assert stored.ts == "1722527938.123456"
    assert stored.channel == "C_TEST"

def test_ingest_redelivery_stores_duplicate(test_db):
    """
    WHY: There is no idempotency key; Slack re-deliveries are stored again.
    HOW: Post the same message event twice.
    EXPECTED: Two rows with the same ts.
    """
    payload = {
        "type": "event_callback",
        "event": {"type": "message", "channel": "C_TEST", "user": "U1", "text": "hi", "ts": "100.000001"}
    }
    client.post("/ingest", json=payload)
    client.post("/ingest", json=payload)

    messages = Repo.recent_messages(10)
    assert [m.ts for m in messages] == ["100.000001", "100.000001"]

@pytest.mark.parametrize("payload", [
    {"type": "event_callback", "event": {"type": "reaction_added", "user": "U1", "reaction": "thumbsup"}},
    {"type": "app_rate_limited", "minute_rate_limited": 1518467820},
    {"event": "not-a-dict"},
    [],
])
def test_ingest_other_payloads_ignored(test_db, payload):
    """
    WHY: Anything that isn't a handshake or a message must be acknowledged without error.
    HOW: Post non-message payload shapes.
    EXPECTED: HTTP 200 {"ok": true} and nothing stored.
    """
    response = client.post("/ingest", json=payload)
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert Repo.count_messages() == 0

def test_ingest_invalid_json_acknowledged(test_db):
    """
    WHY: A garbled body must not turn into a Slack retry storm.
    HOW: Post a non-JSON body.
    EXPECTED: HTTP 200 {"ok": true}, nothing stored.
    """
    response = client.post("/ingest", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert Repo.count_messages() == 0

def test_ingest_store_failure_still_acknowledged(test_db):
    """
    WHY: Ingestion always acknowledges; a failed append is only logged.
    HOW: Make `Repo.append_message` raise StoreUnavailable.
    EXPECTED: HTTP 200 {"ok": true}.
    """
    payload = {
        "type": "event_callback",
        "event": {"type": "message", "channel": "C_TEST", "user": "U1", "text": "hi", "ts": "1.0"}
    }
    with patch.object(Repo, "append_message", side_effect=StoreUnavailable("disk I/O error")):
        response = client.post("/ingest", json=payload)
    assert response.status_code == 200
    assert response.json() == {"ok": True}
