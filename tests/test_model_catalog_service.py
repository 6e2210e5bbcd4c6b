import pytest

from conftest import FakeDirectory, FailingStore
from ollama_chat.application.model_catalog_service import NO_MODELS_WARNING, ModelCatalogService
from ollama_chat.domain.models.conversation import ModelDescriptor, ModelIdentifier
from ollama_chat.domain.models.model_directory import (
    DEFAULT_MODELS,
    ListingFailure,
    ListingFailureKind,
    ModelListing,
)
from ollama_chat.infrastructure.storage.memory_session_store import InMemorySessionStore


def _models(*names):
    return [ModelDescriptor(identifier=ModelIdentifier(f"ollama/{n}"), label=n) for n in names]


def test_unreachable_backend_falls_back_to_defaults_with_warning():
    listing = ModelListing(failure=ListingFailure(ListingFailureKind.UNREACHABLE, "Ollama server is not running"))
    catalog = ModelCatalogService(FakeDirectory(listing)).catalog()

    assert catalog.models == DEFAULT_MODELS
    assert catalog.selected == "ollama/llama2"
    assert catalog.failure_kind is ListingFailureKind.UNREACHABLE
    assert catalog.used_fallback
    assert "Ollama server is not running" in catalog.warning


def test_malformed_response_falls_back_too():
    listing = ModelListing(failure=ListingFailure(ListingFailureKind.MALFORMED_RESPONSE, "bad shape"))
    catalog = ModelCatalogService(FakeDirectory(listing)).catalog()
    assert catalog.models == DEFAULT_MODELS
    assert catalog.failure_kind is ListingFailureKind.MALFORMED_RESPONSE


def test_no_models_returned_uses_defaults():
    catalog = ModelCatalogService(FakeDirectory(ModelListing(models=[]))).catalog()
    assert catalog.models == DEFAULT_MODELS
    assert catalog.warning == NO_MODELS_WARNING
    assert catalog.failure_kind is None


def test_stored_selection_is_kept_when_available():
    store = InMemorySessionStore()
    store.save_selected_model("s1", "ollama/mistral")
    service = ModelCatalogService(FakeDirectory(ModelListing(models=_models("llama2", "mistral"))), store=store)

    catalog = service.catalog("s1")

    assert catalog.selected == "ollama/mistral"
    assert catalog.warning is None


def test_unknown_stored_selection_switches_to_first_model():
    store = InMemorySessionStore()
    store.save_selected_model("s1", "ollama/gone")
    service = ModelCatalogService(FakeDirectory(ModelListing(models=_models("llama2", "mistral"))), store=store)

    catalog = service.catalog("s1")

    assert catalog.selected == "ollama/llama2"
    assert store.load_selected_model("s1") == "ollama/llama2"


def test_selection_storage_failure_is_a_warning():
    service = ModelCatalogService(FakeDirectory(ModelListing(models=_models("llama2"))), store=FailingStore())
    assert "disk full" in service.select_model("s1", "ollama/llama2")
    # Listing still succeeds even though the selection could not be saved
    assert service.catalog("s1").selected == "ollama/llama2"


@pytest.mark.parametrize("listing", [
    ModelListing(failure=ListingFailure(ListingFailureKind.UNREACHABLE, "not running")),
    ModelListing(models=[]),
])
def test_fallback_list_replaces_a_stored_selection_it_does_not_offer(listing):
    store = InMemorySessionStore()
    store.save_selected_model("s1", "ollama/qwen-gone")

    catalog = ModelCatalogService(FakeDirectory(listing), store=store).catalog("s1")

    assert catalog.selected == "ollama/llama2"
    assert store.load_selected_model("s1") == "ollama/llama2"


def test_fallback_list_keeps_a_stored_selection_it_offers():
    store = InMemorySessionStore()
    store.save_selected_model("s1", "ollama/mistral")
    listing = ModelListing(failure=ListingFailure(ListingFailureKind.UNREACHABLE, "not running"))

    catalog = ModelCatalogService(FakeDirectory(listing), store=store).catalog("s1")

    assert catalog.selected == "ollama/mistral"
    assert store.load_selected_model("s1") == "ollama/mistral"
