"""Message routing: decide which capability answers an inbound message.

Two interchangeable strategies share the same contract:

- ``CommandRouter`` matches fixed slash-command prefixes and builds the prompt locally.
- ``FunctionCallRouter`` advertises summarize/translate functions and lets the LLM
  pick one, then runs the matching local handler.

Routers hold no per-message state and can serve concurrent messages.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from relay_router import actions, commands
from relay_router import tools  # noqa: F401  # register function declarations
from relay_router.models import IncomingMessage, OutgoingReply
from relay_router.tools import registry

if TYPE_CHECKING:
    from collections.abc import Mapping

    from llm_client_api import Client

STRATEGY_PREFIX = "prefix"
STRATEGY_FUNCTION_CALL = "function_call"

UNRECOGNIZED_REQUEST = (
    "I don't recognize that request. I can summarize a paragraph or translate a sentence to another language."
)
CANNOT_HANDLE = "Sorry, I can't handle that request."

logger = logging.getLogger("relay_router")


class BaseRouter(ABC):
    """Turns one inbound message into one reply."""

    def __init__(self, client: Client) -> None:
        self._client = client

    async def handle(self, message: IncomingMessage) -> OutgoingReply:
        """Route a normalized inbound message from any transport."""
        logger.info("Received message from %s (%s): %s", message.source_id, message.provider, message.text)
        reply = await self.route(message.text)
        logger.info("Reply to %s: %s", message.source_id, _preview(reply.text))
        return reply

    @abstractmethod
    async def route(self, text: str) -> OutgoingReply:
        """Return the reply for a raw message."""
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Slash-command routing
# ---------------------------------------------------------------------------


class CommandRouter(BaseRouter):
    """Route by lexical slash-command prefixes, falling through to free-form chat."""

    def __init__(self, client: Client, *, help_enabled: bool = True) -> None:
        super().__init__(client)
        self._help_enabled = help_enabled

    @property
    def help_enabled(self) -> bool:
        return self._help_enabled

    async def route(self, text: str) -> OutgoingReply:
        command = commands.classify(text, help_enabled=self._help_enabled)

        if isinstance(command, commands.Summarize):
            return await actions.summarize(self._client, command.text)
        if isinstance(command, commands.Translate):
            return await actions.translate(self._client, command.text, command.target_language)
        if isinstance(command, commands.FreeForm):
            return await actions.converse(self._client, command.text)
        if isinstance(command, commands.Guidance):
            return OutgoingReply(kind="bot", text=command.text)
        if isinstance(command, commands.Help):
            return OutgoingReply(kind="bot", text=commands.HELP_TEXT)
        return OutgoingReply(kind="bot", text=commands.unrecognized_text(help_enabled=self._help_enabled))


# ---------------------------------------------------------------------------
# Function-call routing
# ---------------------------------------------------------------------------


class FunctionCallRouter(BaseRouter):
    """Let the LLM choose between the registered functions."""

    async def route(self, text: str) -> OutgoingReply:
        result = await actions.generate(self._client, text, registry.list_definitions())
        if not result.ok:
            logger.warning("LLM function selection failed: %s", result.reason)
            return OutgoingReply(kind="bot", text=actions.CONVERSE_FAILED)
        if not result.function_calls:
            return OutgoingReply(kind="bot", text=UNRECOGNIZED_REQUEST)

        call = result.function_calls[0]
        arguments = decode_arguments(call.args)
        if arguments is None:
            logger.warning("Undecodable arguments for %s: %r", call.name, call.args)
            return OutgoingReply(kind="bot", text=CANNOT_HANDLE)

        reply = await registry.run_tool(call.name, arguments, client=self._client)
        return reply or OutgoingReply(kind="bot", text=CANNOT_HANDLE)


def decode_arguments(raw: Mapping[str, Any] | str | None) -> dict[str, Any] | None:
    """Normalize function-call arguments that may arrive parsed or JSON-encoded.

    Returns:
        The argument mapping, or None when a string does not decode to a JSON object.

    """
    if raw is None:
        return {}
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return None
        return decoded if isinstance(decoded, dict) else None
    return dict(raw)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_router(client: Client, strategy: str = STRATEGY_PREFIX, *, help_enabled: bool = True) -> BaseRouter:
    """Build the router for the configured strategy."""
    if strategy == STRATEGY_PREFIX:
        return CommandRouter(client, help_enabled=help_enabled)
    if strategy == STRATEGY_FUNCTION_CALL:
        return FunctionCallRouter(client)
    raise ValueError(f"Unsupported routing strategy: {strategy}")  # noqa: TRY003, EM102


def _preview(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."
