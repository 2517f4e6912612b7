"""AsyncBrief - a Slack conversation dashboard backed by LLM analyses.

Slack messages are ingested over the Events API and appended to a SQLite
log. On request, the most recent window of messages is sent to an LLM to
produce a summary, a sentiment score, action items and flagged
miscommunications.

Components:
- main_api: FastAPI app (ingestion + analysis endpoints)
- store: SQLite message log
- pipeline: parameterized analysis pipeline and its four variants
- llm: OpenAI client wrapper, prompt loading, result schemas
- slack: event parsing and history backfill
- dashboard: terminal presentation layer
- mlops: optional MLflow tracing
"""

__version__ = "0.1.0"
