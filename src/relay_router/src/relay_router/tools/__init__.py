"""Functions the LLM may select in function-call routing mode."""

from relay_router.tools import commands

__all__ = ["commands"]
