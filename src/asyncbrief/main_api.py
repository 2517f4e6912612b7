"""HTTP surface of AsyncBrief.

POST /ingest receives Slack Events API payloads; the GET routes serve the
message window and the four analyses. Analysis failures become HTTP 500
with an {"error": ...} body.

Usage:
    uvicorn asyncbrief.main_api:app --port 8000
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from .config import get_settings
from .errors import AnalysisError, DataUnavailable, StoreUnavailable
from .log import setup_logging, get_logger
from .store.db import init_db
from .store.repo import Repo
from .slack.parse import is_url_verification, parse_event
from .pipeline.analysis import pipeline
from .pipeline.variants import VARIANTS, SUMMARY, SENTIMENT, ACTION_ITEMS, MISCOMMUNICATIONS

settings = get_settings()
setup_logging()
logger = get_logger("api")

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

app = FastAPI(title="AsyncBrief", lifespan=lifespan)

@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    logger.error(f"Analysis failed: {exc}")
    if isinstance(exc, DataUnavailable):
        message = "Could not fetch messages"
    else:
        message = VARIANTS[exc.variant].error_message
    return JSONResponse(status_code=500, content={"error": message})

@app.post("/ingest")
async def ingest(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Ignoring non-JSON ingest body")
        return {"ok": True}

    if not isinstance(payload, dict):
        return {"ok": True}

    # Slack URL verification handshake
    if is_url_verification(payload):
        return {"challenge": payload.get("challenge")}

    message = parse_event(payload)
    if message is None:
        return {"ok": True}

    try:
        Repo.append_message(message)
        logger.info(f"Stored message {message.ts} from {message.channel}")
    except StoreUnavailable:
        # Acknowledge anyway so Slack does not keep re-delivering.
        logger.exception(f"Dropped message {message.ts}")

    return {"ok": True}

@app.get("/messages")
def messages():
    try:
        rows = Repo.recent_messages(settings.MESSAGES_LIMIT, ascending=False)
    except StoreUnavailable as e:
        return JSONResponse(status_code=500, content={"error": str(e)})
    return [m.model_dump() for m in rows]

@app.get("/summary")
def summary():
    return pipeline.respond(SUMMARY)

@app.get("/sentiment")
def sentiment():
    return pipeline.respond(SENTIMENT)

@app.get("/actionItems")
def action_items():
    return pipeline.respond(ACTION_ITEMS)

@app.get("/miscommunications")
def miscommunications():
    return pipeline.respond(MISCOMMUNICATIONS)

@app.get("/health")
def health():
    return {"status": "ok"}

def main():
    import uvicorn
    uvicorn.run("asyncbrief.main_api:app", host="0.0.0.0", port=8000)

if __name__ == "__main__":
    main()
