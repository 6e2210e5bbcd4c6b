"""Domain layer - Pure business logic with no external dependencies."""

from .exceptions import (
    ChatError,
    EmptyMessageError,
    InvalidModelIdentifierError,
    BackendInvocationError,
    ExchangeInProgressError,
    StorageError,
)
from .models import (
    FALLBACK_RESPONSE,
    TurnRole,
    Turn,
    ConversationHistory,
    ModelIdentifier,
    ModelDescriptor,
    ExchangeRequest,
    ExchangeResult,
)

__all__ = [
    "ChatError",
    "EmptyMessageError",
    "InvalidModelIdentifierError",
    "BackendInvocationError",
    "ExchangeInProgressError",
    "StorageError",
    "FALLBACK_RESPONSE",
    "TurnRole",
    "Turn",
    "ConversationHistory",
    "ModelIdentifier",
    "ModelDescriptor",
    "ExchangeRequest",
    "ExchangeResult",
]
