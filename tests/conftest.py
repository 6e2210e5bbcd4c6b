"""Pytest session bootstrap for this repository.

Responsibilities:
- Ensure the project root is importable
- Pin environment defaults so tests never depend on a developer's .env
- Provide fake backends so no test reaches a real Ollama server
"""

import os
import sys
from typing import Any, List, Optional, Tuple

import pytest

HERE = os.path.dirname(__file__)
ROOT = os.path.abspath(os.path.join(HERE, '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ.setdefault("OLLAMA_SERVER_ADDRESS", "http://localhost:11434")
os.environ.setdefault("OLLAMA_DEFAULT_MODEL", "ollama/gemma3:1b")
os.environ.setdefault("CHAT_STORAGE_BACKEND", "memory")
os.environ.setdefault("CHAT_MAX_RETRIES", "0")

from ollama_chat.application.chat_service import ChatService  # noqa: E402
from ollama_chat.application.model_catalog_service import ModelCatalogService  # noqa: E402
from ollama_chat.bootstrap import ServiceContainer  # noqa: E402
from ollama_chat.domain.models.model_directory import ModelListing  # noqa: E402
from ollama_chat.domain.services.conversation_orchestrator import ConversationOrchestrator  # noqa: E402
from ollama_chat.infrastructure.config.settings import AppSettings  # noqa: E402
from ollama_chat.infrastructure.storage.memory_session_store import InMemorySessionStore  # noqa: E402


class FakeBackend:
    """Returns canned outputs in order (the last one repeats) and records calls."""

    def __init__(self, *outputs: Any, error: Optional[Exception] = None):
        self.outputs: List[Any] = list(outputs) if outputs else ["Hello there."]
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def generate(self, prompt: str, model: str) -> Any:
        self.calls.append((prompt, model))
        if self.error is not None:
            raise self.error
        if len(self.outputs) > 1:
            return self.outputs.pop(0)
        return self.outputs[0]


class FakeDirectory:
    def __init__(self, listing: ModelListing):
        self.listing = listing
        self.calls = 0

    def list_models(self) -> ModelListing:
        self.calls += 1
        return self.listing


class FailingStore(InMemorySessionStore):
    """A store whose writes (and optionally reads) raise StorageError."""

    def __init__(self, fail_reads: bool = False):
        super().__init__()
        self.fail_reads = fail_reads

    def _boom(self, *_args, **_kwargs):
        from ollama_chat.domain.exceptions import StorageError
        raise StorageError("disk full")

    def save(self, session_id, history):
        self._boom()

    def save_selected_model(self, session_id, identifier):
        self._boom()

    def clear(self, session_id):
        self._boom()

    def load(self, session_id):
        if self.fail_reads:
            self._boom()
        return super().load(session_id)


def make_container(backend, listing: Optional[ModelListing] = None, store=None) -> ServiceContainer:
    store = store if store is not None else InMemorySessionStore()
    orchestrator = ConversationOrchestrator(backend, default_model="ollama/gemma3:1b")
    return ServiceContainer(
        settings=AppSettings(),
        chat_service=ChatService(orchestrator, store),
        model_catalog=ModelCatalogService(FakeDirectory(listing or ModelListing()), store=store),
        store=store,
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def orchestrator(backend):
    return ConversationOrchestrator(backend, default_model="ollama/gemma3:1b")
