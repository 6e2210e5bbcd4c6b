"""
Ollama client adapter - Infrastructure implementation of the inference backend protocol.
Handles generate calls against a local Ollama server.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

from ollama import Client

from ...domain.exceptions import BackendInvocationError
from .retry import RetryableOllamaClient, RetryConfig


class OllamaInferenceBackend:
    """Adapter for a local Ollama server implementing InferenceBackend."""

    def __init__(
        self,
        host: str = "http://localhost:11434",
        provider_prefix: str = "ollama",
        timeout: Optional[float] = None,
        retry_config: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._host = host
        self._provider_prefix = provider_prefix
        self._logger = logger or logging.getLogger(__name__)
        self._client = Client(host=host, timeout=timeout)
        self._retry_client = RetryableOllamaClient(self._client, config=retry_config, logger=self._logger)

        self._logger.info(f"Ollama backend initialized - Host: {host}")

    def backend_model_name(self, model: str) -> str:
        """Strip the provider namespace; Ollama only knows bare model names."""
        prefix = f"{self._provider_prefix}/"
        if model.startswith(prefix):
            return model[len(prefix):]
        return model

    def generate(self, prompt: str, model: str) -> Any:
        """Send a single non-streaming generate request and return the raw text."""
        name = self.backend_model_name(model)
        try:
            response = self._retry_client.generate(model=name, prompt=prompt, stream=False)
        except Exception as e:
            self._logger.debug(f"Ollama generate request failed: {e}")
            raise BackendInvocationError(
                f"Ollama API error: {e}",
                cause=e,
                status_code=getattr(e, 'status_code', None),
                model=model,
            ) from e

        # SDK response object, or plain dict from older clients
        if hasattr(response, 'response'):
            return response.response
        if isinstance(response, dict):
            return response.get('response')
        return None
