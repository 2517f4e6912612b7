import pytest
import os
from unittest.mock import patch
from dotenv import load_dotenv

# Settings are cached on first use; pin the test values before any import.
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ["MLFLOW_ENABLE_TRACING"] = "false"

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

# Global setup to ensure we don't accidentally touch production DB

@pytest.fixture(scope="function")
def test_db(tmp_path):
    """
    Creates a temporary database for testing and initializes the schema.
    The `db` module reads `settings.DB_PATH` on every connection, so patching
    the cached settings singleton is enough.
    """
    db_file = tmp_path / "test_asyncbrief.db"

    from asyncbrief.config import get_settings
    settings = get_settings()

    original_db_path = settings.DB_PATH
    settings.DB_PATH = str(db_file)

    from asyncbrief.store.db import init_db
    init_db()

    yield settings

    settings.DB_PATH = original_db_path

@pytest.fixture
def seed_messages(test_db):
    """Append messages given as (text, user, ts) tuples to the test DB."""
    from asyncbrief.store.repo import Repo
    from asyncbrief.schemas.messages import ChatMessage

    def _seed(*rows, channel="C_TEST"):
        for text, user, ts in rows:
            Repo.append_message(ChatMessage(text=text, user=user, ts=ts, channel=channel))
    return _seed

@pytest.fixture
def stub_llm():
    """
    Replaces the OpenAI call with a canned reply.
    Set `.return_value` (raw reply text or None) or `.side_effect` on the yielded mock.
    """
    from asyncbrief.llm.client import llm_client

    with patch.object(llm_client, "complete") as mock:
        yield mock
