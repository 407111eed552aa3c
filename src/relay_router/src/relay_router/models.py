"""Pydantic schemas for transport↔router communication."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

ReplyKind = Literal["user", "bot", "system", "error"]


class IncomingMessage(BaseModel):
    """Normalized inbound chat message."""

    text: str
    source_id: str
    provider: str = "http"


class OutgoingReply(BaseModel):
    """Reply handed back to a transport for delivery."""

    text: str
    kind: ReplyKind = "bot"

    def to_wire(self) -> dict[str, str]:
        """Render the WebSocket frame understood by the chat UI."""
        return {"type": self.kind, "content": self.text}


class ChatFrame(BaseModel):
    """Inbound WebSocket frame sent by the chat UI."""

    content: str
