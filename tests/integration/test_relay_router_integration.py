"""Integration tests for relay_router wiring with the Gemini client."""

from __future__ import annotations

from contextlib import contextmanager
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import pytest
import relay_router.main as app_module
from fastapi.testclient import TestClient
from gemini_client_impl.gemini_impl import GeminiClient
from relay_router.actions import SUMMARIZE_FAILED
from relay_router.tools import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

pytestmark = pytest.mark.integration


class _StubResponse:
    def __init__(self, payload: dict[str, Any]) -> None:
        self.status_code = HTTPStatus.OK
        self.ok = True
        self.text = str(payload)
        self._payload = payload

    def json(self) -> dict[str, Any]:
        return self._payload


class _StubSession:
    """Answers every generateContent call with the queued payloads in order."""

    def __init__(self, *payloads: dict[str, Any]) -> None:
        self.payloads = list(payloads)
        self.bodies: list[dict[str, Any]] = []

    def post(self, _url: str, **kwargs: Any) -> _StubResponse:
        self.bodies.append(kwargs["json"])
        return _StubResponse(self.payloads.pop(0))


def _text(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def _call(name: str, args: dict[str, Any]) -> dict[str, Any]:
    return {"candidates": [{"content": {"role": "model", "parts": [{"functionCall": {"name": name, "args": args}}]}}]}


@contextmanager
def _client_with(monkeypatch: pytest.MonkeyPatch, session: _StubSession) -> Iterator[TestClient]:
    monkeypatch.setattr(app_module, "get_client", lambda: GeminiClient("test-key", session=session))  # type: ignore[arg-type]
    with TestClient(app_module.app) as client:
        yield client


@pytest.mark.circleci
def test_registry_has_default_tool_definitions() -> None:
    """Registry contains the built-in tool definitions."""
    tool_names = {tool.name for tool in registry.list_definitions()}
    assert {"summarize_paragraph", "translate_sentence"} <= tool_names


@pytest.mark.circleci
def test_translate_command_through_gemini(monkeypatch: pytest.MonkeyPatch) -> None:
    """A translate command reaches Gemini with the translation prompt."""
    session = _StubSession(_text("Hola"))
    with _client_with(monkeypatch, session) as client:
        resp = client.post("/events/message", json={"text": "/translate-to-es Hello", "source_id": "u1"})

    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {"text": "Hola", "kind": "bot"}
    prompt = session.bodies[0]["contents"][0]["parts"][0]["text"]
    assert prompt.startswith("Translate the following text to es:")
    assert "Hello" in prompt


@pytest.mark.circleci
def test_gemini_failure_becomes_fallback_reply(monkeypatch: pytest.MonkeyPatch) -> None:
    """An envelope without candidates is answered with the summarize fallback."""
    session = _StubSession({"candidates": []})
    with _client_with(monkeypatch, session) as client:
        resp = client.post("/events/message", json={"text": "/summarise a long text", "source_id": "u1"})

    assert resp.json() == {"text": SUMMARIZE_FAILED, "kind": "bot"}


@pytest.mark.circleci
def test_function_call_strategy_round_trip(monkeypatch: pytest.MonkeyPatch) -> None:
    """Function-call routing dispatches the tool Gemini picks and runs its prompt."""
    monkeypatch.setattr(app_module, "ROUTER_STRATEGY", "function_call")
    session = _StubSession(
        _call("translate_sentence", {"sentence": "Good morning", "target_language": "French"}),
        _text("Bonjour"),
    )
    with _client_with(monkeypatch, session) as client:
        with client.websocket_connect("/") as ws:
            ws.receive_json()
            ws.send_json({"content": "how do I say good morning in French"})
            reply = ws.receive_json()

    assert reply == {"type": "bot", "content": "Bonjour"}
    declared = {decl["name"] for decl in session.bodies[0]["tools"][0]["functionDeclarations"]}
    assert {"summarize_paragraph", "translate_sentence"} <= declared
    assert "tools" not in session.bodies[1]
