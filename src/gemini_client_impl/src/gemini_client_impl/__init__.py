"""Public exports for the Gemini client implementation package."""

from gemini_client_impl.gemini_impl import register as _register_client
from gemini_client_impl.models_impl import register as _register_models


def register() -> None:
    """Register the Gemini client and model implementations."""
    _register_client()
    _register_models()


register()
