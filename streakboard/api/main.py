"""
streakboard.api.main — FastAPI application entry point
=======================================================

Read-only view of the bot's persisted state (requires DATABASE_URL).

Run with::

    uvicorn streakboard.api.main:app --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from streakboard.api.deps import get_engine  # noqa: E402
from streakboard.api.routes.public import router as public_router  # noqa: E402
from streakboard.database.engine import init_db  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — make sure the snapshot tables exist."""
    engine = get_engine()
    init_db(engine)
    logger.info("Streakboard API started — engine ready (%s)", engine.url.database)
    yield
    logger.info("Streakboard API shutting down")


app = FastAPI(
    title="Streakboard API",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(public_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
