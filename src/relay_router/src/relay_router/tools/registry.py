"""Function registry for function-call routing."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from llm_client_api import Client, FunctionDeclaration
    from relay_router.models import OutgoingReply

ToolHandler = Callable[..., Awaitable["OutgoingReply"]]

_TOOL_HANDLERS: dict[str, ToolHandler] = {}
_TOOL_DEFINITIONS: list[FunctionDeclaration] = []
logger = logging.getLogger("relay_router.tools")


# ---------------------------------------------------------------------------
# Registry API
# ---------------------------------------------------------------------------


def register_tool(definition: FunctionDeclaration, handler: ToolHandler) -> None:
    """Register a function declaration and its handler."""
    if definition.name in _TOOL_HANDLERS:
        msg = f"Tool already registered: {definition.name}"
        raise ValueError(msg)
    _TOOL_DEFINITIONS.append(definition)
    _TOOL_HANDLERS[definition.name] = handler


def list_definitions() -> list[FunctionDeclaration]:
    """Return all registered function declarations."""
    return list(_TOOL_DEFINITIONS)


async def run_tool(name: str, arguments: dict[str, Any], *, client: Client) -> OutgoingReply | None:
    """Execute a registered tool.

    Arguments are filtered to the declared properties. Returns None when the tool is
    unknown or a required argument is missing, so the caller can answer with a
    generic refusal.
    """
    handler = _TOOL_HANDLERS.get(name)
    if handler is None:
        logger.warning("Unknown tool requested: %s", name or "unknown")
        return None

    schema = _definition(name).parameters
    properties = schema.get("properties", {})
    missing = [key for key in schema.get("required", []) if not arguments.get(key)]
    if missing:
        logger.warning("Tool %s called without %s", name, ", ".join(missing))
        return None

    payload = {key: value for key, value in arguments.items() if key in properties}
    return await handler(client=client, **payload)


def _definition(name: str) -> FunctionDeclaration:
    return next(definition for definition in _TOOL_DEFINITIONS if definition.name == name)
