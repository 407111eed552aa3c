"""Gemini models implementation colocated with the Gemini client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

import llm_client_api
from llm_client_api import models

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

# ---------------------------------------------------------------------------
# Response envelope (generateContent)
# ---------------------------------------------------------------------------


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FunctionCallPayload(_Envelope):
    """``functionCall`` part emitted when the model selects a declared function."""

    name: str
    args: dict[str, Any] | str | None = None


class Part(_Envelope):
    """One content part; either text or a function call."""

    text: str | None = None
    function_call: FunctionCallPayload | None = Field(default=None, alias="functionCall")


class Content(_Envelope):
    """Candidate content made of parts."""

    parts: list[Part] = Field(default_factory=list)
    role: str | None = None


class Candidate(_Envelope):
    """One alternative completion."""

    content: Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class GenerateContentResponse(_Envelope):
    """Top-level ``generateContent`` response body."""

    candidates: list[Candidate] = Field(default_factory=list)
    function_calls: list[FunctionCallPayload] = Field(default_factory=list, alias="functionCalls")


# ---------------------------------------------------------------------------
# Gemini models
# ---------------------------------------------------------------------------


class GeminiFunctionCall(models.FunctionCall):
    """Function call selected by Gemini."""

    def __init__(self, name: str, args: Mapping[str, Any] | str | None = None) -> None:
        """Create a function call from its name and raw arguments."""
        self._name = name
        self._args = args

    @property
    def name(self) -> str:
        """Get the selected function name."""
        return self._name

    @property
    def args(self) -> Mapping[str, Any] | str | None:
        """Get the raw arguments as returned by the API."""
        return self._args


class GeminiResult(models.GenerationResult):
    """Generation result; build with ``succeeded`` or ``failed``."""

    def __init__(
        self,
        *,
        ok: bool,
        text: str | None = None,
        function_calls: Sequence[models.FunctionCall] = (),
        reason: str | None = None,
    ) -> None:
        """Create a result payload."""
        self._ok = ok
        self._text = text
        self._function_calls: list[models.FunctionCall] = list(function_calls)
        self._reason = reason

    @classmethod
    def succeeded(cls, text: str | None, function_calls: Sequence[models.FunctionCall] = ()) -> GeminiResult:
        """Build a successful result."""
        return cls(ok=True, text=text, function_calls=function_calls)

    @classmethod
    def failed(cls, reason: str) -> GeminiResult:
        """Build a failed result."""
        return cls(ok=False, reason=reason)

    @property
    def ok(self) -> bool:
        """Get whether the request succeeded."""
        return self._ok

    @property
    def text(self) -> str | None:
        """Get the reply text."""
        return self._text

    @property
    def function_calls(self) -> list[models.FunctionCall]:
        """Get the function calls chosen by the model."""
        return self._function_calls

    @property
    def reason(self) -> str | None:
        """Get the failure reason."""
        return self._reason

    def __repr__(self) -> str:
        if self._ok:
            return f"GeminiResult(ok=True, text={self._text!r}, function_calls={len(self._function_calls)})"
        return f"GeminiResult(ok=False, reason={self._reason!r})"


class GeminiFunctionDeclaration(models.FunctionDeclaration):
    """Function declaration advertised to Gemini in ``tools``."""

    def __init__(self, name: str, description: str, parameters: dict[str, Any]) -> None:
        """Create a Gemini function declaration."""
        self._name = name
        self._description = description
        self._parameters = parameters

    @property
    def name(self) -> str:
        """Get the function name."""
        return self._name

    @property
    def description(self) -> str:
        """Get the function description."""
        return self._description

    @property
    def parameters(self) -> dict[str, Any]:
        """Get the JSON schema for the function arguments."""
        return self._parameters

    def to_dict(self) -> dict[str, Any]:
        """Return this declaration as a JSON-serializable dict."""
        return {
            "name": self._name,
            "description": self._description,
            "parameters": self._parameters,
        }


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def function_declaration_impl(
    name: str,
    description: str,
    parameters: dict[str, Any],
) -> GeminiFunctionDeclaration:
    """Build a GeminiFunctionDeclaration."""
    return GeminiFunctionDeclaration(name=name, description=description, parameters=parameters)


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def register() -> None:
    """Register Gemini factory helpers with the abstract API."""
    llm_client_api.function_declaration = function_declaration_impl
    models.function_declaration = function_declaration_impl
