"""Domain models package."""

from .conversation import (
    FALLBACK_RESPONSE,
    TurnRole,
    Turn,
    ConversationHistory,
    ModelIdentifier,
    ModelDescriptor,
    ExchangeRequest,
    ExchangeResult,
    restore_history,
)
from .model_directory import (
    DEFAULT_MODELS,
    ListingFailureKind,
    ListingFailure,
    ModelListing,
    ModelCatalog,
)

__all__ = [
    "FALLBACK_RESPONSE",
    "TurnRole",
    "Turn",
    "ConversationHistory",
    "ModelIdentifier",
    "ModelDescriptor",
    "ExchangeRequest",
    "ExchangeResult",
    "restore_history",
    "DEFAULT_MODELS",
    "ListingFailureKind",
    "ListingFailure",
    "ModelListing",
    "ModelCatalog",
]
