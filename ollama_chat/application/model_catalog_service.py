"""
Model catalog service - Applies fallback policy on top of the model directory.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from ..domain.exceptions import StorageError
from ..domain.interfaces.inference_backend import ModelDirectory
from ..domain.interfaces.session_store import SessionStore
from ..domain.models.conversation import ModelDescriptor, ModelIdentifier
from ..domain.models.model_directory import DEFAULT_MODELS, ModelCatalog, ModelListing


NO_MODELS_WARNING = "No models returned from Ollama. Using defaults."


class ModelCatalogService:
    """Lists models for the user, never failing: any listing problem yields the defaults."""

    def __init__(
        self,
        directory: ModelDirectory,
        store: Optional[SessionStore] = None,
        defaults: Sequence[ModelDescriptor] = DEFAULT_MODELS,
        logger: Optional[logging.Logger] = None
    ):
        if not defaults:
            raise ValueError("At least one default model is required")
        self._directory = directory
        self._store = store
        self._defaults = list(defaults)
        self._logger = logger or logging.getLogger(__name__)

    @property
    def defaults(self) -> List[ModelDescriptor]:
        return list(self._defaults)

    def list_models(self) -> ModelListing:
        """Raw directory result, failures included."""
        return self._directory.list_models()

    def catalog(self, session_id: Optional[str] = None) -> ModelCatalog:
        listing = self._directory.list_models()

        if not listing.ok:
            failure = listing.failure
            warning = f"Could not fetch models from Ollama. Using fallback list. Error: {failure.message}"
            self._logger.warning(warning)
            return ModelCatalog(
                models=self.defaults,
                selected=self._resolve_selection(session_id, self._defaults),
                warning=warning,
                failure_kind=failure.kind,
            )

        if not listing.models:
            self._logger.warning(NO_MODELS_WARNING)
            return ModelCatalog(
                models=self.defaults,
                selected=self._resolve_selection(session_id, self._defaults),
                warning=NO_MODELS_WARNING,
            )

        return ModelCatalog(
            models=listing.models,
            selected=self._resolve_selection(session_id, listing.models),
        )

    def select_model(self, session_id: str, identifier: str) -> Optional[str]:
        """Remember a session's model choice. Returns a warning on storage failure."""
        model = ModelIdentifier(identifier)
        if self._store is None:
            return None
        try:
            self._store.save_selected_model(session_id, model)
        except StorageError as e:
            self._logger.warning(f"Could not save selected model: {e}")
            return f"Could not save selected model: {e}"
        return None

    def _load_selection(self, session_id: Optional[str]) -> Optional[str]:
        if self._store is None or session_id is None:
            return None
        try:
            return self._store.load_selected_model(session_id)
        except StorageError as e:
            self._logger.warning(f"Could not load selected model: {e}")
            return None

    def _resolve_selection(self, session_id: Optional[str], models: Sequence[ModelDescriptor]) -> ModelIdentifier:
        """Keep the stored choice if it is offered, otherwise select and remember the first model."""
        stored = self._load_selection(session_id)
        if stored is not None and any(m.identifier == stored for m in models):
            return ModelIdentifier(stored)
        selected = models[0].identifier
        if session_id is not None:
            self.select_model(session_id, selected)
        return selected
