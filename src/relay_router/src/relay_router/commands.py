"""Slash-command grammar and message classification.

Every inbound string maps to exactly one command. Rules are evaluated in a fixed
order and the first match wins, because the prefixes overlap (every command also
starts with ``/``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

SUMMARISE_PREFIX = "/summarise"
TRANSLATE_PREFIX = "/translate-to-"
HELP_PREFIX = "/help"
COMMAND_MARKER = "/"

TRANSLATE_PATTERN = re.compile(r"/translate-to-([a-zA-Z]+)\s+(.+)")

SUMMARISE_USAGE = "Please provide text to summarize after the /summarise command."
TRANSLATE_USAGE = "Please use the format: /translate-to-{language} {text to translate}"
HELP_TEXT = (
    "Available commands:\n"
    "- /summarise {text}: Summarize the provided text\n"
    "- /translate-to-{language} {text}: Translate text to the specified language\n"
    "- /help: Show this help message"
)
UNRECOGNIZED_TEXT = "I don't recognize that command. Available commands are /summarise and /translate-to-{language}."
UNRECOGNIZED_TEXT_WITH_HELP = (
    "I don't recognize that command. Available commands are /summarise, /translate-to-{language} and /help. "
    "Type /help to see what they do."
)


@dataclass(frozen=True)
class Summarize:
    text: str


@dataclass(frozen=True)
class Translate:
    text: str
    target_language: str


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Unrecognized:
    raw_text: str


@dataclass(frozen=True)
class FreeForm:
    text: str


@dataclass(frozen=True)
class Guidance:
    """A command was recognized but its arguments were missing or malformed."""

    text: str


Command = Union[Summarize, Translate, Help, Unrecognized, FreeForm, Guidance]


def classify(text: str, *, help_enabled: bool = True) -> Command:
    """Classify a raw message into a command.

    Args:
        text: Raw inbound message text.
        help_enabled: Whether ``/help`` is offered; when False it is treated as unrecognized.

    Returns:
        The single command selected for the message.

    """
    if text.startswith(SUMMARISE_PREFIX):
        remainder = text[len(SUMMARISE_PREFIX) :].strip()
        if not remainder:
            return Guidance(SUMMARISE_USAGE)
        return Summarize(remainder)

    if text.startswith(TRANSLATE_PREFIX):
        match = TRANSLATE_PATTERN.fullmatch(text)
        if match is None:
            return Guidance(TRANSLATE_USAGE)
        return Translate(text=match.group(2), target_language=match.group(1))

    if help_enabled and text.startswith(HELP_PREFIX):
        return Help()

    if text.startswith(COMMAND_MARKER):
        return Unrecognized(text)

    return FreeForm(text)


def unrecognized_text(*, help_enabled: bool) -> str:
    """Return the reply listing known commands for an unknown slash command."""
    return UNRECOGNIZED_TEXT_WITH_HELP if help_enabled else UNRECOGNIZED_TEXT
