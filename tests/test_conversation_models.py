import pytest

from ollama_chat.domain.exceptions import InvalidModelIdentifierError
from ollama_chat.domain.models.conversation import (
    ConversationHistory,
    ModelDescriptor,
    ModelIdentifier,
    Turn,
    TurnRole,
    restore_history,
)
from ollama_chat.domain.services.prompt_renderer import PromptRenderer


def test_model_identifier_is_trimmed_and_opaque():
    ident = ModelIdentifier("  ollama/llama2:latest ")
    assert ident == "ollama/llama2:latest"
    assert ident.short_name() == "llama2:latest"
    assert ModelIdentifier("custom/model").short_name() == "custom/model"


@pytest.mark.parametrize("value", ["", "   ", None, 3])
def test_model_identifier_rejects_unusable_values(value):
    with pytest.raises(InvalidModelIdentifierError):
        ModelIdentifier(value)


def test_append_exchange_returns_new_history():
    history = ConversationHistory.of([Turn.user("hi"), Turn.model("hello")])
    updated = history.append_exchange("next", "reply")

    assert len(history) == 2
    assert updated.to_list()[-2:] == [
        {"role": "user", "content": "next"},
        {"role": "model", "content": "reply"},
    ]


def test_from_list_rejects_unknown_roles():
    with pytest.raises(ValueError):
        ConversationHistory.from_list([{"role": "system", "content": "x"}])


def test_restore_history_drops_bad_entries_and_extra_keys():
    data = [
        {"id": "abc", "role": "user", "content": "hi"},
        {"role": "assistant", "content": "wrong role"},
        {"role": "model", "content": None},
        "not a turn",
        {"role": "model", "content": "hello"},
    ]
    history, skipped = restore_history(data)

    assert skipped == 3
    assert history.to_list() == [
        {"role": "user", "content": "hi"},
        {"role": "model", "content": "hello"},
    ]


def test_restore_history_requires_a_list():
    with pytest.raises(ValueError):
        restore_history({"role": "user", "content": "hi"})


def test_descriptor_option_shape():
    descriptor = ModelDescriptor(identifier=ModelIdentifier("ollama/mistral"), label="mistral")
    assert descriptor.to_option() == {"value": "ollama/mistral", "label": "mistral"}


def test_prompt_embeds_content_verbatim():
    history = ConversationHistory.of([Turn(TurnRole.USER, "<b>{{x}}</b>")])
    prompt = PromptRenderer().render("a & b", history)
    assert "user: <b>{{x}}</b>" in prompt
    assert "User Message: a & b" in prompt
    assert prompt.rstrip().endswith("Assistant's Plain Text Response:")


def test_prompt_with_empty_history():
    prompt = PromptRenderer(instructions="Be brief.").render("hello", ConversationHistory())
    assert prompt.startswith("Be brief.\n\nChat History:\n\nUser Message: hello")
