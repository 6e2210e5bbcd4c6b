import ollama
import pytest

from ollama_chat.domain.exceptions import BackendInvocationError
from ollama_chat.infrastructure.ollama.client import OllamaInferenceBackend
from ollama_chat.infrastructure.config.settings import RetrySettings
from ollama_chat.infrastructure.ollama.retry import RetryableOllamaClient, RetryConfig


class _DummyClient:
    """Stands in for ollama.Client; behaviour is set per test via ``script``."""
    script = []
    instances = []

    def __init__(self, host=None, timeout=None, **kwargs):
        self.host = host
        self.timeout = timeout
        self.calls = []
        _DummyClient.instances.append(self)

    def generate(self, **kwargs):
        self.calls.append(kwargs)
        step = _DummyClient.script.pop(0) if len(_DummyClient.script) > 1 else _DummyClient.script[0]
        if isinstance(step, Exception):
            raise step
        return step


@pytest.fixture(autouse=True)
def _patch_ollama_client(monkeypatch):
    _DummyClient.instances = []
    monkeypatch.setattr('ollama_chat.infrastructure.ollama.client.Client', _DummyClient)
    yield


def _backend(**kwargs):
    config = RetryConfig(max_retries=2, base_delay=0.0, jitter=0.0)
    return OllamaInferenceBackend(host="http://localhost:11434", timeout=30.0, retry_config=config, **kwargs)


def test_strips_provider_prefix_and_returns_raw_text():
    _DummyClient.script = [{'response': '  hi  '}]
    backend = _backend()

    assert backend.generate("prompt text", "ollama/llama2:latest") == '  hi  '
    client = _DummyClient.instances[0]
    assert client.host == "http://localhost:11434"
    assert client.timeout == 30.0
    assert client.calls == [{'model': 'llama2:latest', 'prompt': 'prompt text', 'stream': False}]


def test_unprefixed_identifier_passes_through():
    _DummyClient.script = [{'response': 'ok'}]
    backend = _backend()
    backend.generate("p", "mistral")
    assert _DummyClient.instances[0].calls[0]['model'] == 'mistral'


def test_sdk_style_response_object():
    class _Resp:
        response = None
    _DummyClient.script = [_Resp()]
    assert _backend().generate("p", "ollama/x") is None


def test_model_not_found_is_not_retried():
    _DummyClient.script = [ollama.ResponseError('model "nope" not found', 404)]
    backend = _backend()

    with pytest.raises(BackendInvocationError) as info:
        backend.generate("p", "ollama/nope")

    assert info.value.status_code == 404
    assert info.value.model == "ollama/nope"
    assert len(_DummyClient.instances[0].calls) == 1


def test_connection_errors_are_retried_then_succeed():
    _DummyClient.script = [ConnectionError("refused"), ConnectionError("refused"), {'response': 'back'}]
    backend = _backend()

    assert backend.generate("p", "ollama/llama2") == 'back'
    assert len(_DummyClient.instances[0].calls) == 3


def test_retries_are_bounded():
    _DummyClient.script = [ConnectionError("refused")]
    backend = _backend()

    with pytest.raises(BackendInvocationError) as info:
        backend.generate("p", "ollama/llama2")

    assert isinstance(info.value.cause, ConnectionError)
    assert len(_DummyClient.instances[0].calls) == 3


def test_retry_delays_back_off_exponentially():
    delays = []

    class _Flaky:
        def __init__(self):
            self.calls = 0

        def generate(self, **kwargs):
            self.calls += 1
            raise ollama.ResponseError("busy", 503)

    config = RetryConfig(max_retries=3, base_delay=1.0, jitter=0.0)
    client = RetryableOllamaClient(_Flaky(), config=config, sleep=delays.append)

    with pytest.raises(ollama.ResponseError):
        client.generate(model="m", prompt="p")
    assert delays == [1.0, 2.0, 4.0]


def test_retry_config_from_settings(monkeypatch):
    monkeypatch.setenv("CHAT_MAX_RETRIES", "4")
    monkeypatch.setenv("CHAT_RETRY_BACKOFF_BASE", "1.5")
    monkeypatch.setenv("CHAT_RETRY_JITTER_MAX", "0")
    monkeypatch.setenv("CHAT_RETRYABLE_STATUS_CODES", "502,503")

    config = RetryConfig.from_settings(RetrySettings(_env_file=None))

    assert config.max_retries == 4
    assert config.base_delay == 1.5
    assert config.jitter == 0.0
    assert config.retryable_status_codes == [502, 503]


def test_disabled_retries_mean_a_single_attempt(monkeypatch):
    monkeypatch.setenv("CHAT_RETRY_ENABLED", "false")
    monkeypatch.setenv("CHAT_MAX_RETRIES", "5")

    assert RetryConfig.from_settings(RetrySettings(_env_file=None)).max_retries == 0
