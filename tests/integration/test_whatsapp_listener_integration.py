"""Integration tests for whatsapp_listener wiring against the relay service."""

from __future__ import annotations

import importlib
import sys
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock

import pytest
import relay_router.main as app_module
from fastapi.testclient import TestClient
from whatsapp_listener.session import ChatMessage

if TYPE_CHECKING:
    from types import ModuleType

pytestmark = pytest.mark.integration


class _DummyResult:
    ok = True
    function_calls: list[Any] = []
    reason = None

    def __init__(self, text: str) -> None:
        self.text = text


class _ReverseAI:
    def generate(self, prompt: str, tools: Any = None) -> _DummyResult:
        return _DummyResult(prompt[::-1])


def _load_listener(monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    monkeypatch.setenv("RELAY_BASE_URL", "http://testserver")

    if "whatsapp_listener.main" in sys.modules:
        del sys.modules["whatsapp_listener.main"]

    import whatsapp_listener.main as module

    return importlib.reload(module)


@pytest.mark.circleci
def test_handle_message_round_trips_through_relay(monkeypatch: pytest.MonkeyPatch) -> None:
    """A WhatsApp message is posted to the relay and its reply sent back."""
    listener = _load_listener(monkeypatch)
    monkeypatch.setattr(app_module, "get_client", _ReverseAI)
    session = Mock()
    chat_message = ChatMessage(message_id="m1", chat="Alice", text="hello")

    with TestClient(app_module.app) as relay:

        def fake_post(url: str, json: dict[str, Any], timeout: float) -> Any:
            assert url == "http://testserver/events/message"
            assert json["provider"] == "whatsapp"
            return relay.post("/events/message", json=json)

        monkeypatch.setattr(listener.requests, "post", fake_post)
        listener.handle_message(session, chat_message)

    session.reply.assert_called_once_with(chat_message, "olleh")


@pytest.mark.circleci
def test_guidance_is_relayed_without_llm(monkeypatch: pytest.MonkeyPatch) -> None:
    """Usage errors from the relay reach the chat unchanged."""
    listener = _load_listener(monkeypatch)
    ai = Mock()
    monkeypatch.setattr(app_module, "get_client", lambda: ai)
    session = Mock()
    chat_message = ChatMessage(message_id="m2", chat="Alice", text="/translate-to-fr")

    with TestClient(app_module.app) as relay:
        monkeypatch.setattr(
            listener.requests,
            "post",
            lambda _url, json, timeout: relay.post("/events/message", json=json),
        )
        listener.handle_message(session, chat_message)

    reply = session.reply.call_args.args[1]
    assert reply.startswith("Please use the format:")
    ai.generate.assert_not_called()
