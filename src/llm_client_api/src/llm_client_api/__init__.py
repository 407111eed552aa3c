"""Public export surface for ``llm_client_api``."""

from llm_client_api.client import Client, get_client
from llm_client_api.models import (
    FunctionCall,
    FunctionDeclaration,
    GenerationResult,
    function_declaration,
)

__all__ = [
    "Client",
    "FunctionCall",
    "FunctionDeclaration",
    "GenerationResult",
    "function_declaration",
    "get_client",
]
