"""
Ollama model directory - Lists models available on the Ollama server.
Failures are reported as values so callers can fall back to defaults.
"""

from __future__ import annotations
import logging
from typing import Any, List, Optional

import requests

from ...domain.models.conversation import ModelDescriptor, ModelIdentifier
from ...domain.models.model_directory import ListingFailure, ListingFailureKind, ModelListing


UNREACHABLE_MESSAGE = "Ollama server is not running or is not accessible at the configured address."
BACKEND_ERROR_MESSAGE = "Failed to fetch models from Ollama server."
MALFORMED_MESSAGE = "Unexpected response format from Ollama server."


class OllamaModelDirectory:
    """Queries ``GET /api/tags`` and maps entries to model descriptors."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        provider_prefix: str = "ollama",
        timeout: float = 10.0,
        logger: Optional[logging.Logger] = None
    ):
        self._base_url = base_url.rstrip('/')
        self._provider_prefix = provider_prefix
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)

    @property
    def tags_url(self) -> str:
        return f"{self._base_url}/api/tags"

    def list_models(self) -> ModelListing:
        headers = {
            "Content-Type": "application/json",
            # Always reflect the server's current state
            "Cache-Control": "no-cache, no-store",
            "Pragma": "no-cache",
        }
        try:
            resp = requests.get(self.tags_url, headers=headers, timeout=self._timeout)
        except requests.exceptions.ConnectionError as e:
            self._logger.error(f"Error fetching Ollama models: {e}")
            return self._failed(ListingFailureKind.UNREACHABLE, UNREACHABLE_MESSAGE)
        except requests.exceptions.RequestException as e:
            self._logger.error(f"Error fetching Ollama models: {e}")
            return self._failed(ListingFailureKind.UNREACHABLE, str(e) or "Could not connect to Ollama server.")

        if not resp.ok:
            error_body = BACKEND_ERROR_MESSAGE
            try:
                err_json = resp.json()
                if isinstance(err_json, dict) and err_json.get('error'):
                    error_body = str(err_json['error'])
            except ValueError:
                pass
            self._logger.error(f"Ollama API error: {resp.status_code} {resp.reason} {error_body}")
            return self._failed(
                ListingFailureKind.BACKEND_ERROR,
                error_body,
                status_code=resp.status_code,
                details=f"Status: {resp.status_code}",
            )

        try:
            data = resp.json()
        except ValueError:
            self._logger.error("Ollama API response was not JSON")
            return self._failed(ListingFailureKind.MALFORMED_RESPONSE, MALFORMED_MESSAGE)

        if not isinstance(data, dict) or not isinstance(data.get('models'), list):
            self._logger.error(f"Ollama API response format unexpected: {data!r}")
            return self._failed(ListingFailureKind.MALFORMED_RESPONSE, MALFORMED_MESSAGE)

        return ModelListing(models=self._to_descriptors(data['models']))

    def _to_descriptors(self, entries: List[Any]) -> List[ModelDescriptor]:
        models: List[ModelDescriptor] = []
        for entry in entries:
            name = entry.get('name') if isinstance(entry, dict) else None
            if not isinstance(name, str) or not name.strip():
                self._logger.warning(f"Skipping model entry without a name: {entry!r}")
                continue
            models.append(ModelDescriptor(
                identifier=ModelIdentifier(f"{self._provider_prefix}/{name}"),
                label=name,
            ))
        return models

    def _failed(
        self,
        kind: ListingFailureKind,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None
    ) -> ModelListing:
        return ModelListing(failure=ListingFailure(
            kind=kind, message=message, status_code=status_code, details=details
        ))
