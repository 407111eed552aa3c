"""Abstract schemas for generation results and function calling."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = [
    "FunctionCall",
    "FunctionDeclaration",
    "GenerationResult",
    "function_declaration",
]


class FunctionCall(ABC):
    """A function the model selected, with its raw arguments."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the selected function name."""
        raise NotImplementedError

    @property
    @abstractmethod
    def args(self) -> Mapping[str, Any] | str | None:
        """Return the arguments, either already parsed or as a JSON-encoded string."""
        raise NotImplementedError


class GenerationResult(ABC):
    """Outcome of one generation request: a reply or a failure."""

    @property
    @abstractmethod
    def ok(self) -> bool:
        """Return True when the request succeeded and the envelope was understood."""
        raise NotImplementedError

    @property
    @abstractmethod
    def text(self) -> str | None:
        """Return the first text part of the first candidate, if any."""
        raise NotImplementedError

    @property
    @abstractmethod
    def function_calls(self) -> Sequence[FunctionCall]:
        """Return function calls chosen by the model, in order."""
        raise NotImplementedError

    @property
    @abstractmethod
    def reason(self) -> str | None:
        """Return the failure reason for unsuccessful results."""
        raise NotImplementedError


class FunctionDeclaration(ABC):
    """Abstract declaration of a function the model may choose."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the function name."""
        raise NotImplementedError

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the function description."""
        raise NotImplementedError

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """Return the JSON schema of the function parameters."""
        raise NotImplementedError

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the declaration."""
        raise NotImplementedError


def function_declaration(name: str, description: str, parameters: dict[str, Any]) -> FunctionDeclaration:
    """Construct a concrete FunctionDeclaration instance.

    Args:
        name: Function name exposed to the model.
        description: Human-readable description the model uses to pick the function.
        parameters: JSON schema describing the function arguments.

    Returns:
        Concrete FunctionDeclaration instance bound by the active implementation.

    """
    raise NotImplementedError
