# app.py
# FastAPI entrypoint: exposes the analyze handler over HTTP.
# The route accepts every method so the handler itself answers 405 for non-POST.

from __future__ import annotations

import asyncio
import logging
import os
from typing import Awaitable, Optional, TypeVar

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from spudcheck.handler import AnalyzeHandler, InboundRequest
from spudcheck.pipeline import quiet_transport_logging
from spudcheck.schemas import HealthResponse
from spudcheck.settings import Settings, get_settings

load_dotenv()

logger = logging.getLogger("spudcheck.app")

T = TypeVar("T")

# Not sent to anyone; the client is already gone.
CLIENT_CLOSED_REQUEST = 499

ANALYZE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def run_unless_disconnected(
    request: Request, work: Awaitable[T], poll_interval: float
) -> Optional[T]:
    """
    Await `work` while polling the client connection.
    Returns None (after cancelling `work`) if the client disconnects first.
    """
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected; cancelling provider call")
                return None
    finally:
        if not task.done():
            task.cancel()


# -----------------------------------------------------------------------------
# App setup
# -----------------------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    st = settings or get_settings()
    handler = AnalyzeHandler(st, transport=transport)

    app = FastAPI(title="Spudcheck")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(st.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = st
    app.state.handler = handler

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------
    @app.get("/api/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok", has_api_key=st.has_api_key, model=st.GEMINI_MODEL)

    @app.api_route("/api/analyze", methods=ANALYZE_METHODS)
    @app.api_route("/.netlify/functions/analyze", methods=ANALYZE_METHODS)  # old frontend path
    async def analyze(request: Request):
        raw = await request.body()
        event = InboundRequest(
            http_method=request.method,
            body=raw.decode("utf-8", errors="replace") if raw else None,
        )

        if st.CANCEL_ON_DISCONNECT:
            result = await run_unless_disconnected(
                request, handler.handle(event), st.DISCONNECT_POLL_INTERVAL
            )
            if result is None:
                return Response(status_code=CLIENT_CLOSED_REQUEST)
        else:
            result = await handler.handle(event)

        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type=result.content_type,
        )

    @app.get("/")
    def root():
        return {"message": "Spudcheck is running. POST /api/analyze with {\"imageData\": \"<base64>\"}"}

    return app


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    quiet_transport_logging()


configure_logging(get_settings())
app = create_app()


# -----------------------------------------------------------------------------
# Local dev
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
