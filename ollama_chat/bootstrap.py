"""
Service wiring - Builds the object graph from settings.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from .application.chat_service import ChatService
from .application.model_catalog_service import ModelCatalogService
from .domain.interfaces.session_store import SessionStore
from .domain.services.conversation_orchestrator import ConversationOrchestrator
from .infrastructure.config.settings import AppSettings, get_settings
from .infrastructure.ollama.client import OllamaInferenceBackend
from .infrastructure.ollama.model_directory import OllamaModelDirectory
from .infrastructure.ollama.retry import RetryConfig
from .infrastructure.storage.json_session_store import JsonSessionStore
from .infrastructure.storage.memory_session_store import InMemorySessionStore


@dataclass
class ServiceContainer:
    """Process-wide services; read-only after startup."""
    settings: AppSettings
    chat_service: ChatService
    model_catalog: ModelCatalogService
    store: SessionStore

    @property
    def orchestrator(self) -> ConversationOrchestrator:
        return self.chat_service.orchestrator


def build_store(settings: AppSettings) -> SessionStore:
    if settings.storage.backend == 'memory':
        return InMemorySessionStore()
    return JsonSessionStore(settings.storage.directory)


def build_container(
    settings: Optional[AppSettings] = None,
    logger: Optional[logging.Logger] = None
) -> ServiceContainer:
    settings = settings or get_settings()
    ollama_cfg = settings.ollama

    backend = OllamaInferenceBackend(
        host=ollama_cfg.server_address,
        provider_prefix=ollama_cfg.provider_prefix,
        timeout=ollama_cfg.request_timeout_s,
        retry_config=RetryConfig.from_settings(settings.retry),
        logger=logger,
    )
    directory = OllamaModelDirectory(
        base_url=ollama_cfg.server_address,
        provider_prefix=ollama_cfg.provider_prefix,
        timeout=ollama_cfg.listing_timeout_s,
        logger=logger,
    )
    store = build_store(settings)
    orchestrator = ConversationOrchestrator(
        backend,
        default_model=ollama_cfg.default_model,
        timeout_s=settings.conversation.exchange_timeout_s,
        logger=logger,
    )
    return ServiceContainer(
        settings=settings,
        chat_service=ChatService(orchestrator, store, logger=logger),
        model_catalog=ModelCatalogService(directory, store=store, logger=logger),
        store=store,
    )
