"""
Conversation domain models - Pure data types for chat exchanges.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple, Iterable, Iterator
from enum import Enum

from ..exceptions import InvalidModelIdentifierError


FALLBACK_RESPONSE = "I'm sorry, I was unable to generate a response at this moment."


class TurnRole(Enum):
    """Roles a turn can carry in a conversation."""
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class Turn:
    """A single role-tagged message in a conversation."""
    role: TurnRole
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted/wire format."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(role=TurnRole.USER, content=content)

    @classmethod
    def model(cls, content: str) -> Turn:
        return cls(role=TurnRole.MODEL, content=content)


@dataclass(frozen=True)
class ConversationHistory:
    """Ordered, append-only sequence of turns.

    Instances are immutable: appending returns a new history, so a caller's
    history value is never changed by an exchange.
    """
    turns: Tuple[Turn, ...] = ()

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)

    def __getitem__(self, index):
        return self.turns[index]

    def append_exchange(self, user_content: str, model_content: str) -> ConversationHistory:
        """Return a new history with the user turn and then the model turn appended."""
        return ConversationHistory(
            turns=self.turns + (Turn.user(user_content), Turn.model(model_content))
        )

    def to_list(self) -> List[Dict[str, Any]]:
        return [turn.to_dict() for turn in self.turns]

    @classmethod
    def of(cls, turns: Iterable[Turn]) -> ConversationHistory:
        return cls(turns=tuple(turns))

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> ConversationHistory:
        """Build a history from dictionaries, raising ValueError on bad entries."""
        turns = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"turn {index} is not an object")
            try:
                role = TurnRole(item.get("role"))
            except ValueError:
                raise ValueError(f"turn {index} has unknown role {item.get('role')!r}")
            content = item.get("content")
            if not isinstance(content, str):
                raise ValueError(f"turn {index} content must be a string")
            turns.append(Turn(role=role, content=content))
        return cls(turns=tuple(turns))


class ModelIdentifier(str):
    """Opaque backend selector such as ``ollama/llama2:latest``.

    Only checked for being a non-empty string; the namespace is never parsed
    here.
    """

    def __new__(cls, value: str) -> ModelIdentifier:
        if not isinstance(value, str):
            raise InvalidModelIdentifierError(f"Model identifier must be a string, got {type(value).__name__}")
        value = value.strip()
        if not value:
            raise InvalidModelIdentifierError("Model identifier must not be empty")
        return super().__new__(cls, value)

    def short_name(self, provider_prefix: str = "ollama") -> str:
        """Identifier without its provider namespace, for display."""
        prefix = f"{provider_prefix}/"
        if self.startswith(prefix):
            return self[len(prefix):]
        return str(self)


@dataclass(frozen=True)
class ModelDescriptor:
    """A selectable backend model."""
    identifier: ModelIdentifier
    label: str

    def to_option(self) -> Dict[str, str]:
        """Shape used by the HTTP layer: ``{value, label}``."""
        return {"value": str(self.identifier), "label": self.label}


@dataclass(frozen=True)
class ExchangeRequest:
    """Input for one exchange: a new message plus the history before it."""
    message: str
    history: ConversationHistory = field(default_factory=ConversationHistory)
    model_identifier: Optional[ModelIdentifier] = None


@dataclass(frozen=True)
class ExchangeResult:
    """Outcome of one exchange."""
    response_text: str
    updated_history: ConversationHistory
    model_identifier: Optional[ModelIdentifier] = None
    used_fallback: bool = False


def restore_history(data: Any) -> Tuple[ConversationHistory, int]:
    """Rebuild a history from persisted data.

    Returns the history and the number of entries that were skipped. Entries
    keep only ``role`` and ``content``; unknown roles and non-string content
    are dropped. Raises ValueError if ``data`` is not a list.
    """
    if not isinstance(data, list):
        raise ValueError(f"stored history must be a list, got {type(data).__name__}")
    turns: List[Turn] = []
    skipped = 0
    for item in data:
        if not isinstance(item, dict) or not isinstance(item.get("content"), str):
            skipped += 1
            continue
        try:
            role = TurnRole(item.get("role"))
        except ValueError:
            skipped += 1
            continue
        turns.append(Turn(role=role, content=item["content"]))
    return ConversationHistory(turns=tuple(turns)), skipped
