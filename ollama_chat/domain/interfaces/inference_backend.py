"""
Inference backend protocol interface.
Defines the contract for services that run the language model.
"""

from __future__ import annotations
from typing import Protocol, Any

from ..models.model_directory import ModelListing


class InferenceBackend(Protocol):
    """Protocol for inference backend implementations."""

    def generate(self, prompt: str, model: str) -> Any:
        """Run a prompt against a model and return its raw textual output.

        The return value may be ``None`` or of an unexpected type; callers
        normalize it. Invocation failures are raised.
        """
        ...


class ModelDirectory(Protocol):
    """Protocol for listing models currently available on the backend."""

    def list_models(self) -> ModelListing:
        """List models. Failures are reported in the result, never raised."""
        ...
