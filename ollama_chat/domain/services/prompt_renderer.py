"""
Prompt renderer - Builds the single instruction prompt sent for an exchange.
"""

from __future__ import annotations
from typing import List

from ..models.conversation import ConversationHistory


DEFAULT_INSTRUCTIONS = (
    "You are a helpful AI assistant. Respond to the user message, taking into account "
    "the chat history to provide contextually relevant responses.\n"
    "IMPORTANT: Your response must be plain text only. Do not wrap your response in JSON. "
    "Do not output any schema definitions or JSON formatting."
)


class PromptRenderer:
    """Renders history and the new message into one prompt.

    Turns are emitted exactly as given: same order, no deduplication, no
    truncation. Content is inserted verbatim.
    """

    def __init__(self, instructions: str = DEFAULT_INSTRUCTIONS):
        self._instructions = instructions

    def render(self, message: str, history: ConversationHistory) -> str:
        lines: List[str] = [self._instructions, "", "Chat History:"]
        for turn in history:
            lines.append(f"{turn.role.value}: {turn.content}")
        lines.extend([
            "",
            f"User Message: {message}",
            "",
            "Assistant's Plain Text Response:",
        ])
        return "\n".join(lines)
