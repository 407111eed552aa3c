"""FastAPI relay service.

Serves the WebSocket chat transport and an HTTP message endpoint used by the
WhatsApp listener. The router and its LLM client are built once at startup; a
missing GEMINI_API_KEY aborts startup.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request

import gemini_client_impl  # noqa: F401  # ensure LLM implementation registers itself
from llm_client_api import get_client
from relay_router.models import IncomingMessage, OutgoingReply
from relay_router.router import STRATEGY_PREFIX, BaseRouter, build_router
from relay_router.websocket_routes import router as chat_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("relay_router")

ROUTER_STRATEGY = os.environ.get("ROUTER_STRATEGY", STRATEGY_PREFIX).strip().lower()
HELP_COMMAND_ENABLED = os.environ.get("HELP_COMMAND_ENABLED", "true").strip().lower() in ("1", "true", "yes", "on")
HOST = os.environ.get("HOST", "0.0.0.0")  # noqa: S104
PORT = int(os.environ.get("PORT", "8080"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the message router once per process."""
    app.state.router = build_router(get_client(), ROUTER_STRATEGY, help_enabled=HELP_COMMAND_ENABLED)
    logger.info("Router ready (strategy=%s, help=%s)", ROUTER_STRATEGY, HELP_COMMAND_ENABLED)
    yield


app = FastAPI(title="Relay Router Service", version="0.1.0", lifespan=lifespan)
app.include_router(chat_router)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict[str, str]:
    """Return a basic health payload."""
    return {"status": "ok"}


@app.post("/events/message", response_model=OutgoingReply)
async def handle_message(incoming_message: IncomingMessage, request: Request) -> OutgoingReply:
    """Handle inbound chat messages from listeners."""
    message_router: BaseRouter = request.app.state.router
    return await message_router.handle(incoming_message)


def main() -> None:
    """Run the relay service."""
    logger.info("WebSocket server is running on port %s", PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
