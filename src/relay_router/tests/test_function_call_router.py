"""Unit tests for LLM-driven function-call routing."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from relay_router import actions
from relay_router.router import CANNOT_HANDLE, UNRECOGNIZED_REQUEST, FunctionCallRouter, decode_arguments


class _ScriptedClient:
    """Returns queued results in order and records every call."""

    def __init__(self, *results: Any) -> None:
        self._results = list(results)
        self.calls: list[tuple[str, Any]] = []

    def generate(self, prompt: str, tools: Any = None) -> Any:
        self.calls.append((prompt, tools))
        return self._results.pop(0)


def _selection(name: str, args: Any) -> SimpleNamespace:
    call = SimpleNamespace(name=name, args=args)
    return SimpleNamespace(ok=True, text=None, function_calls=[call], reason=None)


def _text(text: str) -> SimpleNamespace:
    return SimpleNamespace(ok=True, text=text, function_calls=[], reason=None)


@pytest.mark.asyncio
async def test_selection_request_advertises_both_functions() -> None:
    """The raw message is sent with the summarize and translate declarations."""
    client = _ScriptedClient(_text("just chatting"))
    await FunctionCallRouter(client).route("hello")

    prompt, tools = client.calls[0]
    assert prompt == "hello"
    assert {tool.name for tool in tools} == {"summarize_paragraph", "translate_sentence"}


@pytest.mark.asyncio
async def test_no_function_chosen_is_unrecognized() -> None:
    """Plain text answers mean the request was not understood."""
    reply = await FunctionCallRouter(_ScriptedClient(_text("hmm"))).route("tell me a joke")

    assert reply.text == UNRECOGNIZED_REQUEST


@pytest.mark.asyncio
async def test_summarize_selection_runs_local_handler() -> None:
    """A chosen summarize call runs the summarize action with its prompt."""
    client = _ScriptedClient(_selection("summarize_paragraph", {"paragraph": "long text"}), _text("short"))
    reply = await FunctionCallRouter(client).route("please summarize: long text")

    assert reply.text == "short"
    assert client.calls[1] == ("Please summarize the following text concisely:\n\n    long text", None)


@pytest.mark.asyncio
async def test_translate_selection_with_json_string_args() -> None:
    """JSON-encoded arguments are decoded once."""
    args = '{"sentence": "Good night", "target_language": "German"}'
    client = _ScriptedClient(_selection("translate_sentence", args), _text("Gute Nacht"))
    reply = await FunctionCallRouter(client).route("good night in german")

    assert reply.text == "Gute Nacht"
    assert client.calls[1][0].startswith("Translate the following text to German:")


@pytest.mark.asyncio
async def test_handler_failure_uses_command_apology() -> None:
    """Handler gateway failures map like prefix routing does."""
    failed = SimpleNamespace(ok=False, text=None, function_calls=[], reason="http 503")
    client = _ScriptedClient(_selection("translate_sentence", {"sentence": "Hi", "target_language": "it"}), failed)
    reply = await FunctionCallRouter(client).route("hi in italian")

    assert reply.text == "Sorry, I encountered an error while trying to translate to it."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "args"),
    [
        ("order_pizza", {"size": "large"}),
        ("summarize_paragraph", "not json"),
        ("summarize_paragraph", "[1, 2]"),
        ("summarize_paragraph", {}),
        ("translate_sentence", {"sentence": "Hi"}),
    ],
)
async def test_unusable_selection_cannot_be_handled(name: str, args: Any) -> None:
    """Unknown names or unusable arguments give the generic refusal without a second call."""
    client = _ScriptedClient(_selection(name, args))
    reply = await FunctionCallRouter(client).route("do something")

    assert reply.text == CANNOT_HANDLE
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_selection_failure_is_generic_apology() -> None:
    """A failed selection request yields the processing apology."""
    failed = SimpleNamespace(ok=False, text=None, function_calls=[], reason="http 500")
    reply = await FunctionCallRouter(_ScriptedClient(failed)).route("hi")

    assert reply.text == actions.CONVERSE_FAILED


def test_decode_arguments_variants() -> None:
    """Arguments arrive as mappings, JSON strings or not at all."""
    assert decode_arguments({"a": 1}) == {"a": 1}
    assert decode_arguments('{"a": 1}') == {"a": 1}
    assert decode_arguments(None) == {}
    assert decode_arguments("{bad") is None
    assert decode_arguments('"text"') is None
