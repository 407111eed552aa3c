"""Summarize/translate functions advertised to the LLM in function-call mode."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from relay_router import actions
from relay_router.tools.registry import register_tool

if TYPE_CHECKING:
    from llm_client_api import Client
    from relay_router.models import OutgoingReply

LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "gemini")
if LLM_PROVIDER == "gemini":
    import gemini_client_impl  # noqa: F401
else:
    raise RuntimeError("Unsupported LLM_PROVIDER")  # noqa: EM101, TRY003

from llm_client_api import function_declaration  # noqa: E402

# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


async def summarize_paragraph(*, client: Client, paragraph: str) -> OutgoingReply:
    """Summarize the paragraph chosen by the model."""
    return await actions.summarize(client, paragraph)


async def translate_sentence(*, client: Client, sentence: str, target_language: str) -> OutgoingReply:
    """Translate the sentence chosen by the model."""
    return await actions.translate(client, sentence, target_language)


# ---------------------------------------------------------------------------
# Tool registrations
# ---------------------------------------------------------------------------


register_tool(
    function_declaration(
        name="summarize_paragraph",
        description="Summarize a paragraph of text the user provides.",
        parameters={
            "type": "object",
            "properties": {
                "paragraph": {"type": "string", "description": "The paragraph to summarize."},
            },
            "required": ["paragraph"],
        },
    ),
    summarize_paragraph,
)


register_tool(
    function_declaration(
        name="translate_sentence",
        description="Translate a sentence the user provides into a target language.",
        parameters={
            "type": "object",
            "properties": {
                "sentence": {"type": "string", "description": "The sentence to translate."},
                "target_language": {"type": "string", "description": "Language to translate into, e.g. French."},
            },
            "required": ["sentence", "target_language"],
        },
    ),
    translate_sentence,
)
