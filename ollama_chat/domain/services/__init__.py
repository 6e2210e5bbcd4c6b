"""Domain services package."""

from .conversation_orchestrator import ConversationOrchestrator
from .prompt_renderer import PromptRenderer

__all__ = ["ConversationOrchestrator", "PromptRenderer"]
