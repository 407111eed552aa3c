"""WebSocket chat transport for the browser UI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from relay_router.models import ChatFrame, IncomingMessage, OutgoingReply
from relay_router.router import BaseRouter, CommandRouter

if TYPE_CHECKING:
    from collections.abc import Mapping

router = APIRouter(tags=["Chat"])

WELCOME_TEXT = (
    "Welcome to the chatbot! You can use /summarise to summarize text or /translate-to-{language} to translate text."
)
WELCOME_HELP_SUFFIX = " Type /help to see all commands."
PROCESSING_ERROR = "An error occurred while processing your message."

logger = logging.getLogger("relay_router.websocket")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.websocket("/")
async def chat_socket(websocket: WebSocket) -> None:
    """Relay chat frames to the router until the client disconnects."""
    message_router: BaseRouter = websocket.app.state.router
    await websocket.accept()
    client_id = _client_id(websocket)
    logger.info("Client connected: %s", client_id)
    await websocket.send_json(OutgoingReply(kind="system", text=welcome_text(message_router)).to_wire())

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = frame_text(message)
            if raw is None:
                logger.warning("Unreadable frame from %s", client_id)
                reply = OutgoingReply(kind="error", text=PROCESSING_ERROR)
            else:
                reply = await handle_frame(message_router, raw, client_id)
            await websocket.send_json(reply.to_wire())
    except WebSocketDisconnect:
        logger.info("Client disconnected: %s", client_id)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def handle_frame(message_router: BaseRouter, raw: str, client_id: str) -> OutgoingReply:
    """Parse one inbound frame and route it; malformed frames get an error reply."""
    try:
        frame = ChatFrame.model_validate_json(raw)
    except ValidationError:
        logger.warning("Malformed frame from %s: %s", client_id, raw[:200])
        return OutgoingReply(kind="error", text=PROCESSING_ERROR)

    incoming = IncomingMessage(text=frame.content, source_id=client_id, provider="websocket")
    try:
        return await message_router.handle(incoming)
    except Exception:
        logger.exception("Error processing message from %s", client_id)
        return OutgoingReply(kind="error", text=PROCESSING_ERROR)


def frame_text(message: Mapping[str, Any]) -> str | None:
    """Return the text of a received frame; binary frames are decoded as UTF-8."""
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def welcome_text(message_router: BaseRouter) -> str:
    """Return the greeting sent when a client connects."""
    if isinstance(message_router, CommandRouter) and message_router.help_enabled:
        return WELCOME_TEXT + WELCOME_HELP_SUFFIX
    return WELCOME_TEXT


def _client_id(websocket: WebSocket) -> str:
    if websocket.client is None:
        return "unknown"
    return f"{websocket.client.host}:{websocket.client.port}"
