"""In-memory session store, for tests and ephemeral servers."""

from __future__ import annotations
from typing import Dict, Optional

from ...domain.models.conversation import ConversationHistory


class InMemorySessionStore:
    def __init__(self):
        self._histories: Dict[str, ConversationHistory] = {}
        self._models: Dict[str, str] = {}

    def load(self, session_id: str) -> Optional[ConversationHistory]:
        return self._histories.get(session_id)

    def save(self, session_id: str, history: ConversationHistory) -> None:
        self._histories[session_id] = history

    def clear(self, session_id: str) -> None:
        self._histories.pop(session_id, None)

    def load_selected_model(self, session_id: str) -> Optional[str]:
        return self._models.get(session_id)

    def save_selected_model(self, session_id: str, identifier: str) -> None:
        self._models[session_id] = str(identifier)
