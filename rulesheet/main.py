from __future__ import annotations

import logging
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import APP_TITLE, DEBUG, RULES_FETCH_TIMEOUT
from .db import init_db
from .routers import lists, print_rules

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(title=APP_TITLE, debug=DEBUG)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.on_event("startup")
async def startup_event() -> None:
    init_db()
    app.state.http_client = httpx.AsyncClient(timeout=RULES_FETCH_TIMEOUT)
    logger.info("Application started")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    client = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()
        app.state.http_client = None


@app.get("/")
def index() -> dict[str, str]:
    return {"status": "ok", "app": APP_TITLE}


app.include_router(lists.router)
app.include_router(print_rules.router)
