import json

import pytest

from ollama_chat.domain.exceptions import StorageError
from ollama_chat.domain.models.conversation import ConversationHistory, Turn
from ollama_chat.infrastructure.storage.json_session_store import HISTORY_FILE, JsonSessionStore


def test_save_and_load_history(tmp_path):
    store = JsonSessionStore(tmp_path / "sessions")
    history = ConversationHistory.of([Turn.user("hi"), Turn.model("hello")])

    assert store.load("s1") is None
    store.save("s1", history)

    assert store.load("s1") == history
    on_disk = json.loads((tmp_path / "sessions" / "s1" / HISTORY_FILE).read_text(encoding="utf-8"))
    assert on_disk == [{"role": "user", "content": "hi"}, {"role": "model", "content": "hello"}]


def test_selected_model_round_trip(tmp_path):
    store = JsonSessionStore(tmp_path)
    assert store.load_selected_model("s1") is None
    store.save_selected_model("s1", "ollama/llama2:latest")
    assert store.load_selected_model("s1") == "ollama/llama2:latest"


def test_non_array_history_is_discarded(tmp_path):
    store = JsonSessionStore(tmp_path)
    path = tmp_path / "s1" / HISTORY_FILE
    path.parent.mkdir(parents=True)
    path.write_text('{"role": "user"}', encoding="utf-8")

    with pytest.raises(StorageError):
        store.load("s1")
    assert not path.exists()
    assert store.load("s1") is None


def test_corrupt_json_is_discarded(tmp_path):
    store = JsonSessionStore(tmp_path)
    path = tmp_path / "s1" / HISTORY_FILE
    path.parent.mkdir(parents=True)
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(StorageError):
        store.load("s1")
    assert not path.exists()


def test_invalid_turns_are_dropped_on_load(tmp_path):
    store = JsonSessionStore(tmp_path)
    path = tmp_path / "s1" / HISTORY_FILE
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps([
        {"id": "x1", "role": "user", "content": "hi"},
        {"role": "bot", "content": "?"},
    ]), encoding="utf-8")

    assert store.load("s1").to_list() == [{"role": "user", "content": "hi"}]


def test_clear_removes_history_only(tmp_path):
    store = JsonSessionStore(tmp_path)
    store.save("s1", ConversationHistory.of([Turn.user("hi"), Turn.model("yo")]))
    store.save_selected_model("s1", "ollama/mistral")

    store.clear("s1")

    assert store.load("s1") is None
    assert store.load_selected_model("s1") == "ollama/mistral"


@pytest.mark.parametrize("session_id", ["../escape", "", "a/b", "x" * 200])
def test_session_ids_are_validated(tmp_path, session_id):
    store = JsonSessionStore(tmp_path)
    with pytest.raises(StorageError):
        store.save(session_id, ConversationHistory())
