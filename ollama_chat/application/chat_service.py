"""
Chat service - Application service running exchanges for stored sessions.
Coordinates the orchestrator with best-effort session persistence.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..domain.exceptions import StorageError
from ..domain.interfaces.session_store import SessionStore
from ..domain.models.conversation import ConversationHistory, ExchangeResult, ModelIdentifier
from ..domain.services.conversation_orchestrator import ConversationOrchestrator


HISTORY_SAVE_WARNING = "Could not save chat history. Storage might be full or unavailable."


@dataclass
class ChatOutcome:
    """An exchange result plus any non-fatal warnings raised around it."""
    result: ExchangeResult
    session_id: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class ChatService:
    """Runs exchanges, loading and saving session state around them.

    Storage failures never abort an exchange; they come back as warnings.
    A failed exchange leaves the stored history untouched.
    """

    def __init__(
        self,
        orchestrator: ConversationOrchestrator,
        store: SessionStore,
        logger: Optional[logging.Logger] = None
    ):
        self._orchestrator = orchestrator
        self._store = store
        self._logger = logger or logging.getLogger(__name__)

    @property
    def orchestrator(self) -> ConversationOrchestrator:
        return self._orchestrator

    async def send(
        self,
        message: str,
        session_id: Optional[str] = None,
        model_identifier: Optional[str] = None,
        history: Optional[ConversationHistory] = None
    ) -> ChatOutcome:
        warnings: List[str] = []
        model_identifier = (model_identifier or "").strip() or None

        if session_id is not None and history is None:
            history, load_warnings = self.load_history(session_id)
            warnings.extend(load_warnings)
        if session_id is not None and model_identifier is None:
            model_identifier = self.get_selected_model(session_id)

        result = await self._orchestrator.converse(
            message,
            history,
            model_identifier,
            session_id=session_id,
        )

        if session_id is not None:
            try:
                self._store.save(session_id, result.updated_history)
            except StorageError as e:
                self._logger.warning(f"Failed to save chat history for {session_id}: {e}")
                warnings.append(HISTORY_SAVE_WARNING)
            if model_identifier is not None:
                try:
                    self._store.save_selected_model(session_id, result.model_identifier)
                except StorageError as e:
                    self._logger.warning(f"Failed to save selected model for {session_id}: {e}")
                    warnings.append(f"Could not save selected model: {e}")

        return ChatOutcome(result=result, session_id=session_id, warnings=warnings)

    def load_history(self, session_id: str) -> Tuple[ConversationHistory, List[str]]:
        """Stored history, or an empty one (with a warning) when it cannot be read."""
        try:
            history = self._store.load(session_id)
        except StorageError as e:
            self._logger.warning(f"Failed to load chat history for {session_id}: {e}")
            return ConversationHistory(), [f"Stored chat history was discarded: {e}"]
        return (history if history is not None else ConversationHistory()), []

    def clear_history(self, session_id: str) -> List[str]:
        try:
            self._store.clear(session_id)
        except StorageError as e:
            self._logger.warning(f"Failed to clear chat history for {session_id}: {e}")
            return [f"Could not clear chat history: {e}"]
        return []

    def get_selected_model(self, session_id: str) -> Optional[ModelIdentifier]:
        try:
            stored = self._store.load_selected_model(session_id)
        except StorageError as e:
            self._logger.warning(f"Failed to load selected model for {session_id}: {e}")
            return None
        if not stored:
            return None
        return ModelIdentifier(stored)
