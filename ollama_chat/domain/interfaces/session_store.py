"""
Session store protocol interface.
Defines the contract for persisting per-session chat state.
"""

from __future__ import annotations
from typing import Protocol, Optional

from ..models.conversation import ConversationHistory


class SessionStore(Protocol):
    """Protocol for session storage implementations.

    Implementations raise ``StorageError`` on failure; callers treat those as
    warnings.
    """

    def load(self, session_id: str) -> Optional[ConversationHistory]:
        """Load the stored history, or None if nothing is stored."""
        ...

    def save(self, session_id: str, history: ConversationHistory) -> None:
        """Replace the stored history."""
        ...

    def clear(self, session_id: str) -> None:
        """Forget the stored history."""
        ...

    def load_selected_model(self, session_id: str) -> Optional[str]:
        """Load the last selected model identifier."""
        ...

    def save_selected_model(self, session_id: str, identifier: str) -> None:
        """Remember the selected model identifier."""
        ...
