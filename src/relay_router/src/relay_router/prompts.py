"""Prompt templates sent to the LLM for each command."""

from __future__ import annotations

from relay_router.commands import Command, FreeForm, Summarize, Translate

SUMMARIZE_TEMPLATE = "Please summarize the following text concisely:\n\n    {text}"
TRANSLATE_TEMPLATE = (
    "Translate the following text to {language}:\n\n"
    "    {text}\n\n"
    "    Respond with only the translated text, without any additional commentary."
)


def summarize_prompt(text: str) -> str:
    return SUMMARIZE_TEMPLATE.format(text=text)


def translate_prompt(text: str, target_language: str) -> str:
    return TRANSLATE_TEMPLATE.format(language=target_language, text=text)


def free_form_prompt(text: str) -> str:
    return text


def build_prompt(command: Command) -> str:
    """Return the prompt for a command that is answered by the LLM.

    Raises:
        ValueError: The command is answered locally and has no prompt.

    """
    if isinstance(command, Summarize):
        return summarize_prompt(command.text)
    if isinstance(command, Translate):
        return translate_prompt(command.text, command.target_language)
    if isinstance(command, FreeForm):
        return free_form_prompt(command.text)
    raise ValueError(f"No prompt for command: {command!r}")  # noqa: TRY003, EM102
