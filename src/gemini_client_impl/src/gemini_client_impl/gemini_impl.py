"""Gemini Client Implementation.

Concrete llm_client_api.Client backed by the Gemini ``generateContent`` REST endpoint.
Resolves the API key from the environment, validates the response envelope with pydantic
and folds every transport or shape problem into a failed GenerationResult.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import requests

import llm_client_api
from gemini_client_impl.models_impl import (
    GeminiFunctionCall,
    GeminiResult,
    GenerateContentResponse,
)
from llm_client_api import Client

if TYPE_CHECKING:
    from collections.abc import Sequence

    from llm_client_api import FunctionDeclaration

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT_SECONDS = 60.0
ERROR_DETAIL_MAX = 500

logger = logging.getLogger("gemini_client_impl")

# ---------------------------------------------------------------------------
# Client implementation
# ---------------------------------------------------------------------------


class GeminiClient(Client):
    """Concrete llm_client_api.Client that forwards prompts to Gemini.

    Authentication:
        - GEMINI_API_KEY (required)
        - GEMINI_MODEL (optional, defaults to gemini-2.0-flash)

    Attributes:
        _api_key: API key sent in the ``x-goog-api-key`` header.
        _model: Model name used for requests.
        _timeout: Per-request timeout in seconds.
        _candidate_count: Optional number of candidates to request; only the first is used.
        _session: HTTP session used for requests.

    """

    def __init__(self, api_key: str | None = None, *, session: requests.Session | None = None) -> None:
        """Initialize the Gemini client, resolving API key/model defaults from the environment."""
        key = api_key or os.environ.get("GEMINI_API_KEY")
        if not key:
            raise RuntimeError("GEMINI_API_KEY is required.")  # noqa: TRY003, EM101
        self._api_key = key
        self._model = os.environ.get("GEMINI_MODEL", DEFAULT_MODEL)
        self._timeout = float(os.environ.get("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self._candidate_count = _parse_candidate_count(os.environ.get("GEMINI_CANDIDATE_COUNT"))
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        """Return the generateContent endpoint for the configured model."""
        return f"{GEMINI_API_BASE_URL}/models/{self._model}:generateContent"

    def generate(
        self,
        prompt: str,
        tools: Sequence[FunctionDeclaration] | None = None,
    ) -> GeminiResult:
        """Invoke Gemini once and return a typed result.

        Args:
            prompt: Instruction text sent as the only content part.
            tools: Optional function declarations; enables functionCall parts in the reply.

        Returns:
            GeminiResult with the first candidate's text/function calls, or a failure reason.

        """
        payload = build_request(prompt, tools, candidate_count=self._candidate_count)
        try:
            response = self._session.post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self._api_key},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Gemini request failed: %s", exc)
            return GeminiResult.failed(f"request error: {exc.__class__.__name__}")

        if not response.ok:
            logger.error("Gemini API error %s: %s", response.status_code, response.text[:ERROR_DETAIL_MAX])
            return GeminiResult.failed(f"http {response.status_code}")

        try:
            envelope = GenerateContentResponse.model_validate(response.json())
        except ValueError as exc:
            logger.error("Unexpected Gemini response envelope: %s", exc)  # noqa: TRY400
            return GeminiResult.failed("invalid envelope")

        return to_result(envelope)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def get_client_impl() -> GeminiClient:
    """Return a new GeminiClient using env defaults."""
    return GeminiClient()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_request(
    prompt: str,
    tools: Sequence[FunctionDeclaration] | None = None,
    *,
    candidate_count: int | None = None,
) -> dict[str, Any]:
    """Build the generateContent request body."""
    body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    if tools:
        body["tools"] = [{"functionDeclarations": [tool.to_dict() for tool in tools]}]
    if candidate_count:
        body["generationConfig"] = {"candidateCount": candidate_count}
    return body


def to_result(envelope: GenerateContentResponse) -> GeminiResult:
    """Convert a validated response envelope into a GeminiResult."""
    if not envelope.candidates or envelope.candidates[0].content is None:
        logger.error("Gemini response has no candidate content")
        return GeminiResult.failed("missing candidates[0].content")

    parts = envelope.candidates[0].content.parts
    text = parts[0].text if parts and parts[0].text else None
    calls = [
        GeminiFunctionCall(name=part.function_call.name, args=part.function_call.args)
        for part in parts
        if part.function_call is not None
    ]
    calls.extend(GeminiFunctionCall(name=call.name, args=call.args) for call in envelope.function_calls)

    if text is None and not calls:
        logger.error("Gemini response has no text part")
        return GeminiResult.failed("missing candidates[0].content.parts[0].text")
    return GeminiResult.succeeded(text, calls)


def _parse_candidate_count(raw: str | None) -> int | None:
    if not raw:
        return None
    count = int(raw)
    if count < 1:
        raise ValueError(f"GEMINI_CANDIDATE_COUNT must be positive, got {count}")  # noqa: TRY003, EM102
    return count


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def register() -> None:
    """Bind the Gemini client factory into llm_client_api.get_client."""
    llm_client_api.get_client = get_client_impl
