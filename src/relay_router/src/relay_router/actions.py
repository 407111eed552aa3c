"""LLM-backed actions shared by both routing strategies.

Each action builds its prompt, calls the gateway once and maps a failed result to a
fixed apology. The failure cause is logged but never shown to the user.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from relay_router import prompts
from relay_router.commands import FreeForm, Summarize, Translate
from relay_router.models import OutgoingReply

if TYPE_CHECKING:
    from collections.abc import Sequence

    from llm_client_api import Client, FunctionDeclaration, GenerationResult

SUMMARIZE_FAILED = "Sorry, I encountered an error while trying to summarize your text."
TRANSLATE_FAILED = "Sorry, I encountered an error while trying to translate to {language}."
CONVERSE_FAILED = "Sorry, I encountered an error while processing your message."

logger = logging.getLogger("relay_router.actions")


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


async def summarize(client: Client, text: str) -> OutgoingReply:
    """Summarize ``text`` with the LLM."""
    result = await generate(client, prompts.build_prompt(Summarize(text)))
    return _reply_or(result, SUMMARIZE_FAILED, action="summarize")


async def translate(client: Client, text: str, target_language: str) -> OutgoingReply:
    """Translate ``text`` into ``target_language`` with the LLM."""
    result = await generate(client, prompts.build_prompt(Translate(text=text, target_language=target_language)))
    return _reply_or(result, TRANSLATE_FAILED.format(language=target_language), action="translate")


async def converse(client: Client, text: str) -> OutgoingReply:
    """Forward free-form conversation to the LLM unchanged."""
    result = await generate(client, prompts.build_prompt(FreeForm(text)))
    return _reply_or(result, CONVERSE_FAILED, action="converse")


# ---------------------------------------------------------------------------
# Gateway helpers
# ---------------------------------------------------------------------------


async def generate(
    client: Client,
    prompt: str,
    tools: Sequence[FunctionDeclaration] | None = None,
) -> GenerationResult:
    """Run the blocking gateway call in a worker thread."""
    if tools:
        return await asyncio.to_thread(client.generate, prompt, tools)
    return await asyncio.to_thread(client.generate, prompt)


def _reply_or(result: GenerationResult, fallback: str, *, action: str) -> OutgoingReply:
    if result.ok and result.text:
        return OutgoingReply(kind="bot", text=result.text)
    logger.warning("LLM %s failed: %s", action, result.reason or "no text in reply")
    return OutgoingReply(kind="bot", text=fallback)
