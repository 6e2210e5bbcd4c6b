"""Application layer - Application services orchestrating business logic."""

from .chat_service import ChatService, ChatOutcome
from .model_catalog_service import ModelCatalogService

__all__ = [
    "ChatService",
    "ChatOutcome",
    "ModelCatalogService",
]
