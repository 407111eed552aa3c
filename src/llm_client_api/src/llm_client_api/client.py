"""Abstract interfaces for text-generation APIs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from llm_client_api.models import FunctionDeclaration, GenerationResult

__all__ = ["Client", "get_client"]


class Client(ABC):
    """The contract for LLM gateways."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        tools: Sequence[FunctionDeclaration] | None = None,
    ) -> GenerationResult:
        """Send a single prompt to the model and return a typed result.

        Implementations must never raise for transport or parse failures; those are
        reported through a result whose ``ok`` flag is False.

        Args:
            prompt: Instruction text sent as the only content part.
            tools: Optional function declarations enabling structured function calls.

        Returns:
            GenerationResult carrying the reply text and/or function calls, or a failure reason.

        """
        raise NotImplementedError


def get_client() -> Client:
    """Return the default LLM client implementation.

    Returns:
        Client implementation.

    """
    raise NotImplementedError
