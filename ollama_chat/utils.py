"""
Utility functions for Ollama Chat.
"""

import logging
import sys
from typing import Optional

from .domain.models.conversation import ConversationHistory, TurnRole


def setup_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt or '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    # Reduce noise from third-party libraries unless debugging
    if level.upper() != "DEBUG":
        for name in ("httpx", "ollama", "urllib3", "requests"):
            logging.getLogger(name).setLevel(logging.WARNING)


def truncate_text(text: str, max_length: int = 100) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_length:
        return text
    return text[:max_length-3] + "..."


def format_conversation_history(history: ConversationHistory, max_entries: int = 10) -> str:
    """Format conversation history for display."""
    if not len(history):
        return "No conversation history"

    turns = list(history)
    recent = turns[-max_entries:] if len(turns) > max_entries else turns
    offset = len(turns) - len(recent)

    result = []
    for i, turn in enumerate(recent, offset + 1):
        role_emoji = '👤' if turn.role is TurnRole.USER else '🤖'
        result.append(f"  {i}. {role_emoji} {turn.role.value}: {truncate_text(turn.content, 150)}")

    if len(turns) > max_entries:
        result.insert(0, f"  ... (showing last {max_entries} of {len(turns)} messages)")

    return "\n".join(result)
